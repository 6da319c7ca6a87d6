"""
Recurrence patterns.

A Pattern describes one or more occurrences in compact timetable
notation, e.g. "Mi1-4 Th 9" (Michaelmas weeks 1 to 4, Thursdays at 9).

Occurrences that share their day/time, or that share their term weeks,
can be merged into a single pattern. Merging is greedy and first-fit:
the result depends on the order of the occurrences, and the same order
always gives the same result.

Important rules (DO NOT CHANGE):
- A full term is the week set {0..7}, while weeks are counted from 1.
- Term segments are concatenated without a separator.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from termpattern.config import DAY_NAMES, TERM_NAMES, WEEKS_PER_TERM
from termpattern.model import DayTime, TermWeek
from termpattern.term_calendar import TermCalendar, default_calendar


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_full_term(weeks: Iterable[int]) -> bool:
    """
    True if the weeks cover an entire term (exactly the weeks 0..7).
    """
    return sorted(weeks) == list(range(WEEKS_PER_TERM))


def aggregate_numbers(numbers: Iterable[int]) -> list[list[int]]:
    """
    Split numbers into blocks of consecutive values.

    [1, 2, 3, 5, 7, 8] -> [[1, 2, 3], [5], [7, 8]]
    """
    blocks: list[list[int]] = []
    for n in sorted(numbers):
        if blocks and n == blocks[-1][-1] + 1:
            blocks[-1].append(n)
        else:
            blocks.append([n])
    return blocks


def _format_blocks(blocks: list[list[int]], names: Optional[tuple[str, ...]] = None) -> str:
    """
    Render blocks as "a-b" / "a", comma separated, optionally via a name table.
    """
    out: list[str] = []
    for block in blocks:
        first, last = block[0], block[-1]
        if names is not None:
            first_s, last_s = names[first], names[last]
        else:
            first_s, last_s = str(first), str(last)
        out.append(f"{first_s}-{last_s}" if len(block) > 1 else first_s)
    return ",".join(out)


# ---------------------------------------------------------------------------
# Pattern
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Pattern:
    """
    A (set of day/times) x (set of term weeks) combination.

    Patterns are values: merge() returns a new Pattern and leaves both
    inputs untouched.
    """

    day_times: tuple[DayTime, ...]
    term_weeks: tuple[TermWeek, ...]

    @classmethod
    def from_instants(
        cls,
        start: datetime,
        end: datetime,
        calendar: Optional[TermCalendar] = None,
        tz: Optional[tzinfo] = None,
    ) -> "Pattern":
        """
        Build the pattern of a single occurrence.

        When tz is given, aware instants are converted into it first
        (e.g. UTC timestamps into Europe/London).
        """
        if tz is not None:
            if start.tzinfo is not None:
                start = start.astimezone(tz)
            if end.tzinfo is not None:
                end = end.astimezone(tz)

        cal = calendar if calendar is not None else default_calendar()
        return cls(
            day_times=(DayTime.from_instants(start, end),),
            term_weeks=(cal.classify(start),),
        )

    def equal_day_times(self, other: "Pattern") -> bool:
        return self.day_times == other.day_times

    def equal_term_weeks(self, other: "Pattern") -> bool:
        return self.term_weeks == other.term_weeks

    def merge(self, other: "Pattern") -> Optional["Pattern"]:
        """
        Try to merge another pattern into this one.

        - same day times: combine the term weeks, sorted by (term start, week)
        - same term weeks: append the other's day times (no sorting)
        - otherwise: None
        """
        if self.equal_day_times(other):
            term_weeks = sorted(self.term_weeks + other.term_weeks, key=TermWeek.sort_key)
            return Pattern(day_times=self.day_times, term_weeks=tuple(term_weeks))

        if self.equal_term_weeks(other):
            return Pattern(day_times=self.day_times + other.day_times, term_weeks=self.term_weeks)

        return None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def format_terms(self) -> str:
        """
        Render the term part, e.g. "Mi1-4" or "MiLe2,5" or "Ea" (full term).
        """
        weeks_by_term: dict[int, set[int]] = defaultdict(set)
        for tw in self.term_weeks:
            weeks_by_term[tw.term.term_index].add(tw.week)

        segments: list[str] = []
        for term_index in sorted(weeks_by_term):
            weeks = weeks_by_term[term_index]
            s = TERM_NAMES[term_index]
            if not is_full_term(weeks):
                s += _format_blocks(aggregate_numbers(weeks))
            segments.append(s)

        return "".join(segments)

    def format_times(self) -> str:
        """
        Render the day/time part, e.g. "Tu,Th 9" or "M-W 2-4 F 10".
        """
        days_by_time: dict[str, set[int]] = defaultdict(set)
        for dt in self.day_times:
            days_by_time[dt.format()].add(dt.day_of_week)

        segments: list[str] = []
        for time_s in sorted(days_by_time):
            days = _format_blocks(aggregate_numbers(days_by_time[time_s]), DAY_NAMES)
            segments.append(f"{days} {time_s}")

        return " ".join(segments)

    def __str__(self) -> str:
        return f"{self.format_terms()} {self.format_times()}"


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def add_first_fit(merged: list[Pattern], pattern: Pattern) -> None:
    """
    Merge pattern into the first pattern of `merged` that accepts it,
    or append it when none does. Updates `merged` in place.
    """
    for i, candidate in enumerate(merged):
        result = candidate.merge(pattern)
        if result is not None:
            merged[i] = result
            return
    merged.append(pattern)


def merge_patterns(patterns: Iterable[Pattern]) -> list[Pattern]:
    """
    Greedy first-fit aggregation over patterns in the given order.
    """
    merged: list[Pattern] = []
    for pattern in patterns:
        add_first_fit(merged, pattern)
    return merged


class FullPattern:
    """
    Accumulates the occurrences of one series and renders all of them.

    Occurrences are merged in the order they are added.
    """

    SEPARATOR = "; "

    def __init__(self, calendar: Optional[TermCalendar] = None, tz: Optional[tzinfo] = None) -> None:
        self.calendar = calendar
        self.tz = tz
        self.patterns: list[Pattern] = []

    def add(self, start: datetime, end: datetime) -> None:
        pattern = Pattern.from_instants(start, end, calendar=self.calendar, tz=self.tz)
        add_first_fit(self.patterns, pattern)

    def __len__(self) -> int:
        return len(self.patterns)

    def __str__(self) -> str:
        return self.SEPARATOR.join(str(p) for p in self.patterns)
