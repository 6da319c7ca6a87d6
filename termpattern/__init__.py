"""
termpattern: academic term calendar, timetable patterns and rollover.

    from termpattern import Pattern, merge_patterns

    patterns = merge_patterns(Pattern.from_instants(s, e) for s, e in occurrences)
    print(patterns[0])  # e.g. "Mi1-4 Th 9"
"""

from termpattern.errors import CalendarConfigError, NoTermsConfigured, TermPatternError, UnknownYear
from termpattern.model import DayTime, Term, TermWeek, format_clock
from termpattern.pattern import FullPattern, Pattern, aggregate_numbers, is_full_term, merge_patterns
from termpattern.rollover import roll_over, roll_over_timestamp
from termpattern.term_calendar import TermCalendar, default_calendar

__all__ = [
    "CalendarConfigError",
    "DayTime",
    "FullPattern",
    "NoTermsConfigured",
    "Pattern",
    "Term",
    "TermCalendar",
    "TermPatternError",
    "TermWeek",
    "UnknownYear",
    "aggregate_numbers",
    "default_calendar",
    "format_clock",
    "is_full_term",
    "merge_patterns",
    "roll_over",
    "roll_over_timestamp",
]
