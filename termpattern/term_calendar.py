"""
The academic term calendar.

Maps an academic year ("2014") to the raw start dates of its three
terms (Michaelmas, Lent, Easter). Note that an academic year spans two
calendar years: Lent 2015 belongs to academic year 2014.

The raw dates do NOT start on a Thursday; Term aligns them.

The table is read once and never changed afterwards, so a single
TermCalendar can be shared freely.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from termpattern.config import TERMS_PER_YEAR, default_term_dates_path
from termpattern.errors import CalendarConfigError, NoTermsConfigured, UnknownYear
from termpattern.model import DateLike, Term, TermWeek

logger = logging.getLogger(__name__)


def _parse_date(value: Any, year: str) -> date:
    """
    Convert a 'YYYY-MM-DD' string (or a date) into a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise CalendarConfigError(f"Invalid term date {value!r} for year {year}") from e


class TermCalendar:
    """
    Read-only table of academic year -> three raw term start dates.
    """

    def __init__(self, table: Mapping[Any, Iterable[Any]]) -> None:
        normalized: dict[str, tuple[date, date, date]] = {}
        for year, raw_dates in table.items():
            key = str(year).strip()
            dates = tuple(_parse_date(d, key) for d in raw_dates)
            if len(dates) != TERMS_PER_YEAR:
                raise CalendarConfigError(
                    f"Academic year {key} needs {TERMS_PER_YEAR} term dates, got {len(dates)}"
                )
            normalized[key] = dates  # type: ignore[assignment]

        self._table = MappingProxyType(normalized)

        # Flat list of every term, in table order. Used to find the
        # term closest to a given date.
        self._all_terms: tuple[Term, ...] = tuple(
            Term.from_raw(year, raw_start, i)
            for year, raw_dates in self._table.items()
            for i, raw_start in enumerate(raw_dates)
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_json(cls, text: str) -> "TermCalendar":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CalendarConfigError(f"Term-date table is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CalendarConfigError("Term-date table must be a JSON object of year -> dates")
        return cls(data)

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "TermCalendar":
        """
        Load the term-date table from a JSON file.

        Without a path the packaged table (or $TERMPATTERN_TERM_DATES) is used.
        """
        dates_path = Path(path) if path is not None else default_term_dates_path()
        try:
            text = dates_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CalendarConfigError(f"Cannot read term-date table {dates_path}: {e}") from e

        calendar = cls.from_json(text)
        logger.debug("Loaded %d academic years from %s", len(calendar.years()), dates_path)
        return calendar

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def table(self) -> Mapping[str, tuple[date, date, date]]:
        return self._table

    def years(self) -> list[str]:
        return list(self._table)

    def terms_for(self, year: Any) -> tuple[date, date, date]:
        """
        Return the raw start dates of the three terms of an academic year.
        """
        try:
            return self._table[str(year).strip()]
        except KeyError:
            raise UnknownYear(year) from None

    def term(self, year: Any, term_index: int) -> Term:
        raw_dates = self.terms_for(year)
        return Term.from_raw(str(year).strip(), raw_dates[term_index], term_index)

    def all_terms(self) -> list[Term]:
        return list(self._all_terms)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def closest_term(self, when: DateLike) -> Term:
        """
        Find the term that contains `when` or is closest to it.

        The distance to a term is the smaller of the distances to its
        aligned start and its end. On a tie the first term in table
        order wins.
        """
        if not self._all_terms:
            raise NoTermsConfigured()

        closest = self._all_terms[0]
        closest_distance = closest.distance_seconds(when)
        for term in self._all_terms[1:]:
            distance = term.distance_seconds(when)
            if distance < closest_distance:
                closest = term
                closest_distance = distance

        return closest

    def classify(self, when: DateLike) -> TermWeek:
        """
        Classify a date into its TermWeek.
        """
        term = self.closest_term(when)
        return TermWeek(term=term, week=term.week_offset(when))


@lru_cache(maxsize=1)
def default_calendar() -> TermCalendar:
    """
    Process-wide calendar, loaded from the default path on first use.
    """
    return TermCalendar.from_file()
