"""
Central data model of the academic calendar.

This module defines the value objects shared by the calendar, pattern
and rollover code:
- Term: one term of one academic year with its aligned start and end
- TermWeek: the (term, week) a date falls into
- DayTime: weekday + clock range of one occurrence

All of them are immutable. Dates are datetime.date, instants are
datetime.datetime (aware or naive, already in the civil calendar of
the term dates).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

from termpattern.config import (
    EARLY_HOUR_LIMIT,
    TERM_NAMES,
    TERM_START_WEEKDAY,
    WEEKS_PER_TERM,
)

DateLike = Union[date, datetime]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def as_datetime(value: DateLike, tzinfo=None) -> datetime:
    """
    Turn a date into midnight of that date (in tzinfo); datetimes pass through.
    """
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time(), tzinfo=tzinfo)


def whole_days(delta: timedelta) -> int:
    """
    Number of whole days in delta, truncated toward zero.

    -1.6 days is -1, not -2 (timedelta.days would floor).
    """
    return int(delta / timedelta(days=1))


def whole_weeks(delta: timedelta) -> int:
    """
    Number of whole weeks in delta, truncated toward zero.
    """
    return int(delta / timedelta(weeks=1))


def day_of_week(value: DateLike) -> int:
    """
    Weekday with Sunday = 0 .. Saturday = 6.
    """
    return value.isoweekday() % 7


def format_clock(hour: int, minute: int) -> str:
    """
    Format one bound of a time range in 12-hour notation.

    - 0 and 12 render as "12"
    - minutes are only added when not on the hour ("9:30")
    - a "!" is appended when the 24-hour value is 7 or earlier

    >>> format_clock(6, 30)
    '6:30!'
    """
    h = hour % 12
    if h == 0:
        h = 12

    s = str(h)
    if minute != 0:
        s += f":{minute:02d}"

    # the marker looks at the 24-hour value, not the reduced one
    if hour <= EARLY_HOUR_LIMIT:
        s += "!"
    return s


# ---------------------------------------------------------------------------
# Term
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Term:
    """
    One term of one academic year.

    `start` is the raw start date moved forward to the next Thursday
    (0-6 days). `end` is 8 weeks after the *raw* start date.
    """

    year: str
    term_index: int
    raw_start: date
    start: date
    end: date

    @classmethod
    def from_raw(cls, year: str, raw_start: date, term_index: int) -> "Term":
        days_to_thursday = (TERM_START_WEEKDAY - raw_start.isoweekday()) % 7
        return cls(
            year=str(year),
            term_index=term_index,
            raw_start=raw_start,
            start=raw_start + timedelta(days=days_to_thursday),
            end=raw_start + timedelta(weeks=WEEKS_PER_TERM),
        )

    @property
    def name(self) -> str:
        return TERM_NAMES[self.term_index]

    def week_offset(self, when: DateLike) -> int:
        """
        Week of this term in which `when` falls (1 = first Thursday week).

        Not clamped: dates before the aligned start give 0 or less,
        dates after the term give more than 8.
        """
        tzinfo = when.tzinfo if isinstance(when, datetime) else None
        days = whole_days(as_datetime(when) - as_datetime(self.start, tzinfo))
        return days // 7 + 1

    def distance_seconds(self, when: DateLike) -> int:
        """
        Distance in whole seconds to the closer of the term's start and end.
        """
        tzinfo = when.tzinfo if isinstance(when, datetime) else None
        moment = as_datetime(when)
        to_start = abs(int((as_datetime(self.start, tzinfo) - moment).total_seconds()))
        to_end = abs(int((as_datetime(self.end, tzinfo) - moment).total_seconds()))
        return min(to_start, to_end)


# ---------------------------------------------------------------------------
# TermWeek
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class TermWeek:
    """
    The term (and week within it) a date belongs to.

    Equality ignores the academic year: week 3 of Michaelmas is the same
    TermWeek in every year. Use TermCalendar.classify() to build one.
    """

    term: Term
    week: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermWeek):
            return NotImplemented
        return self.term.term_index == other.term.term_index and self.week == other.week

    def __hash__(self) -> int:
        return hash((self.term.term_index, self.week))

    def sort_key(self) -> tuple[date, int]:
        return (self.term.start, self.week)

    def __str__(self) -> str:
        return f"{self.term.name}{self.week}"


# ---------------------------------------------------------------------------
# DayTime
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DayTime:
    """
    Represents when during the week one occurrence takes place.

    day_of_week uses Sunday = 0. Only the start instant decides the day;
    of the end instant only the clock time is kept.
    """

    day_of_week: int
    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int

    @classmethod
    def from_instants(cls, start: datetime, end: datetime) -> "DayTime":
        return cls(
            day_of_week=day_of_week(start),
            start_hour=start.hour,
            start_minute=start.minute,
            end_hour=end.hour,
            end_minute=end.minute,
        )

    def format(self) -> str:
        """
        Format the time range of this occurrence.

        One-hour slots on the same minute only show the start ("9"),
        everything else shows both bounds ("9-11", "2:30-4").
        """
        if self.start_minute == self.end_minute and self.end_hour == self.start_hour + 1:
            return format_clock(self.start_hour, self.start_minute)
        return f"{format_clock(self.start_hour, self.start_minute)}-{format_clock(self.end_hour, self.end_minute)}"
