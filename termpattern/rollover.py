"""
Roll timestamps over from one academic year to another.

A timestamp is placed on the same day of the same week of the same
term in the target year, at the same clock time. This is used to reuse
last year's timetable for the coming year.

Week counting here uses its own Thursday approximation: the raw term
dates start on a Tuesday, so the term week is taken to start 2 days
later. For a term that starts Tuesday 7 October:
- week 0 = 7 and 8 October
- week 1 = Thursday 9 until Wednesday 15 October

This differs from Term.start (next Thursday on or after the raw date)
for raw dates that are not Tuesdays. Both are kept as they are.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Sequence

from termpattern.config import ROLLOVER_THURSDAY_SHIFT_DAYS
from termpattern.model import as_datetime, whole_days, whole_weeks
from termpattern.term_calendar import TermCalendar, default_calendar

logger = logging.getLogger(__name__)


def rollover_term_index(instant: datetime, term_dates: Sequence[date]) -> int:
    """
    Index of the term of the source year that `instant` belongs to.

    The latest term whose raw start lies at least one whole week before
    the instant wins; anything earlier counts as the first term.
    """
    for i in reversed(range(len(term_dates))):
        weeks = whole_weeks(instant - as_datetime(term_dates[i], instant.tzinfo))
        if weeks > 0:
            return i
    return 0


def roll_over(
    instant: datetime,
    from_year: Any,
    to_year: Any,
    calendar: Optional[TermCalendar] = None,
) -> datetime:
    """
    Translate `instant` from the term layout of `from_year` to `to_year`.

    Raises UnknownYear when either year is missing from the calendar.
    """
    cal = calendar if calendar is not None else default_calendar()
    from_dates = cal.terms_for(from_year)
    to_dates = cal.terms_for(to_year)

    term_index = rollover_term_index(instant, from_dates)

    shift = timedelta(days=ROLLOVER_THURSDAY_SHIFT_DAYS)
    from_start = from_dates[term_index] + shift
    days = whole_days(instant - as_datetime(from_start, instant.tzinfo))
    weeks = days // 7

    to_start = to_dates[term_index] + shift
    candidate = to_start + timedelta(weeks=weeks)

    # weeks start on a Thursday, so the weekday is relative to the term start
    offset = (instant.isoweekday() - from_start.isoweekday() + 7) % 7
    new_date = candidate + timedelta(days=offset)

    result = datetime.combine(
        new_date,
        time(instant.hour, instant.minute, instant.second),
        tzinfo=instant.tzinfo,
    )
    logger.debug(
        "Rolled %s over to %s (term %d, week %d, offset %d)",
        instant.isoformat(), result.isoformat(), term_index, weeks, offset,
    )
    return result


def roll_over_timestamp(
    timestamp: str,
    from_year: Any,
    to_year: Any,
    calendar: Optional[TermCalendar] = None,
) -> str:
    """
    Same as roll_over(), for ISO-8601 strings.

    '2014-10-09T09:00:00+01:00' -> '2015-10-08T09:00:00+01:00'
    """
    instant = datetime.fromisoformat(timestamp.strip())
    return roll_over(instant, from_year, to_year, calendar=calendar).isoformat(timespec="seconds")
