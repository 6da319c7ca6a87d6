"""
Error types raised by the term calendar, pattern and rollover code.

All errors derive from TermPatternError so callers (mainly the CLI)
can catch them in one place. Nothing in this package recovers from
them internally.
"""

from __future__ import annotations

from typing import Any


class TermPatternError(Exception):
    """
    Base class for all errors raised by termpattern.
    """


class UnknownYear(TermPatternError, KeyError):
    """
    The term-date table has no entry for the requested academic year.
    """

    def __init__(self, year: Any) -> None:
        super().__init__(year)
        self.year = year

    def __str__(self) -> str:
        return f"No term dates configured for academic year {self.year!r}"


class NoTermsConfigured(TermPatternError):
    """
    The term-date table is empty, so no date can be classified.
    """

    def __str__(self) -> str:
        return "The term-date table is empty"


class CalendarConfigError(TermPatternError, ValueError):
    """
    The term-date configuration (or a time zone name) could not be used.
    """
