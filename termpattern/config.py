"""
Configuration constants for the academic term calendar.

The term-date table itself is a hand-maintained JSON file shipped with
the package (data/term_dates.json). Extending coverage to a new academic
year means adding one line to that file, not changing code.
"""

from __future__ import annotations

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from termpattern.errors import CalendarConfigError


# =============================================================================
# FILE PATHS
# =============================================================================

PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"

# Environment variable that points to an alternative term-date file
TERM_DATES_ENV = "TERMPATTERN_TERM_DATES"


def default_term_dates_path() -> Path:
    """
    Return the path of the term-date table.

    Uses $TERMPATTERN_TERM_DATES when set, otherwise the packaged file.
    A function instead of a constant so tests can change the environment.
    """
    override = os.environ.get(TERM_DATES_ENV, "").strip()
    if override:
        return Path(override)
    return DATA_DIR / "term_dates.json"


# =============================================================================
# TERM & DAY NAMES
# =============================================================================

# Official abbreviations for Michaelmas, Lent and Easter (index = term index)
TERM_NAMES = ("Mi", "Le", "Ea")

# Day abbreviations starting on Sunday (index = DayTime.day_of_week)
DAY_NAMES = ("Su", "M", "Tu", "W", "Th", "F", "Sa")

# Number of raw start dates each academic year must have
TERMS_PER_YEAR = 3


# =============================================================================
# TERM ARITHMETIC
# =============================================================================

# A teaching term lasts 8 weeks, counted from the raw (unaligned) start date
WEEKS_PER_TERM = 8

# Term weeks notionally start on a Thursday (ISO weekday, Monday = 1)
TERM_START_WEEKDAY = 4

# The raw dates start on a Tuesday; rollover shifts them by a fixed 2 days
ROLLOVER_THURSDAY_SHIFT_DAYS = 2

# Occurrences at or before this hour get a "!" marker (e.g. "7:30!")
EARLY_HOUR_LIMIT = 7


# =============================================================================
# TIME ZONES
# =============================================================================

# Civil calendar the term dates are expressed in
DEFAULT_TIMEZONE = "Europe/London"


def get_timezone(name: str) -> ZoneInfo:
    """
    Resolve an IANA time zone name.

    Unknown names raise CalendarConfigError (no fallback zone).
    """
    tz_name = (name or "").strip()
    if not tz_name:
        raise CalendarConfigError("Empty time zone name")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise CalendarConfigError(f"Unknown time zone {tz_name!r}") from e
