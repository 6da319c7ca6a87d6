"""
Unit tests for pattern merging and rendering.

Rules checked here:
- same day times -> term weeks are combined and sorted
- same term weeks -> day times are appended
- aggregation is greedy first-fit and depends on input order
- rendering, e.g. "Mi1-4 Th 9"
"""

import unittest
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from termpattern.model import DayTime, Term, TermWeek
from termpattern.pattern import (
    FullPattern,
    Pattern,
    aggregate_numbers,
    is_full_term,
    merge_patterns,
)
from termpattern.term_calendar import TermCalendar

CALENDAR = TermCalendar.from_file()

MI = Term.from_raw("2014", date(2014, 10, 7), 0)
LE = Term.from_raw("2014", date(2015, 1, 13), 1)
EA = Term.from_raw("2014", date(2015, 4, 21), 2)

THU_9 = DayTime(4, 9, 0, 10, 0)
MON_9 = DayTime(1, 9, 0, 10, 0)


def occurrence(start: datetime, hours: int = 1) -> Pattern:
    return Pattern.from_instants(start, start + timedelta(hours=hours), calendar=CALENDAR)


class TestHelpers(unittest.TestCase):
    def test_aggregate_numbers(self) -> None:
        self.assertEqual(aggregate_numbers([1, 2, 3, 5, 7, 8]), [[1, 2, 3], [5], [7, 8]])
        self.assertEqual(aggregate_numbers([8, 7, 1]), [[1], [7, 8]])
        self.assertEqual(aggregate_numbers([]), [])

    def test_is_full_term(self) -> None:
        self.assertTrue(is_full_term({0, 1, 2, 3, 4, 5, 6, 7}))
        self.assertFalse(is_full_term({0, 1, 2, 3, 4, 5, 6}))
        # weeks are 1-based, but a full term is still 0..7
        self.assertFalse(is_full_term({1, 2, 3, 4, 5, 6, 7, 8}))


class TestMerge(unittest.TestCase):
    def test_same_day_times_merge_term_weeks_sorted(self) -> None:
        a = Pattern((THU_9,), (TermWeek(MI, 3),))
        b = Pattern((THU_9,), (TermWeek(MI, 1),))

        ab = a.merge(b)
        ba = b.merge(a)
        assert ab is not None and ba is not None

        self.assertEqual([tw.week for tw in ab.term_weeks], [1, 3])
        self.assertEqual([tw.week for tw in ba.term_weeks], [1, 3])
        # inputs are left untouched
        self.assertEqual(len(a.term_weeks), 1)

    def test_term_weeks_sorted_by_term_start_first(self) -> None:
        a = Pattern((THU_9,), (TermWeek(LE, 1),))
        b = Pattern((THU_9,), (TermWeek(MI, 5),))
        merged = a.merge(b)
        assert merged is not None
        self.assertEqual([tw.term.term_index for tw in merged.term_weeks], [0, 1])

    def test_same_term_weeks_append_day_times(self) -> None:
        a = Pattern((THU_9,), (TermWeek(MI, 1),))
        b = Pattern((MON_9,), (TermWeek(MI, 1),))
        merged = a.merge(b)
        assert merged is not None
        # appended, not sorted
        self.assertEqual(merged.day_times, (THU_9, MON_9))

    def test_nothing_in_common(self) -> None:
        a = Pattern((THU_9,), (TermWeek(MI, 1),))
        b = Pattern((MON_9,), (TermWeek(MI, 2),))
        self.assertIsNone(a.merge(b))

    def test_greedy_merge_depends_on_order(self) -> None:
        p1 = Pattern((THU_9,), (TermWeek(MI, 1),))
        p2 = Pattern((MON_9,), (TermWeek(MI, 2),))
        p3 = Pattern((THU_9,), (TermWeek(MI, 2),))

        first = [str(p) for p in merge_patterns([p1, p2, p3])]
        second = [str(p) for p in merge_patterns([p2, p3, p1])]

        self.assertEqual(first, ["Mi1-2 Th 9", "Mi2 M 9"])
        self.assertEqual(second, ["Mi2 M,Th 9", "Mi1 Th 9"])
        # same order, same result
        self.assertEqual(first, [str(p) for p in merge_patterns([p1, p2, p3])])


class TestRendering(unittest.TestCase):
    def test_four_thursdays(self) -> None:
        patterns = [occurrence(datetime(2014, 10, 9, 9, 0) + timedelta(weeks=i)) for i in range(4)]
        merged = merge_patterns(patterns)
        self.assertEqual(len(merged), 1)
        self.assertEqual(str(merged[0]), "Mi1-4 Th 9")

    def test_gaps_between_weeks(self) -> None:
        weeks = [1, 2, 3, 5, 7, 8]
        p = Pattern((THU_9,), tuple(TermWeek(MI, w) for w in weeks))
        self.assertEqual(str(p), "Mi1-3,5,7-8 Th 9")

    def test_full_term_has_no_week_numbers(self) -> None:
        p = Pattern((THU_9,), tuple(TermWeek(EA, w) for w in range(8)))
        self.assertEqual(str(p), "Ea Th 9")

    def test_term_segments_are_concatenated(self) -> None:
        p = Pattern((THU_9,), (TermWeek(LE, 2), TermWeek(MI, 1), TermWeek(MI, 2)))
        self.assertEqual(str(p), "Mi1-2Le2 Th 9")

    def test_consecutive_days(self) -> None:
        days = (DayTime(1, 9, 0, 10, 0), DayTime(2, 9, 0, 10, 0), DayTime(3, 9, 0, 10, 0), DayTime(5, 9, 0, 10, 0))
        p = Pattern(days, (TermWeek(MI, 1),))
        self.assertEqual(str(p), "Mi1 M-W,F 9")

    def test_time_segments_sorted_as_text(self) -> None:
        p = Pattern((THU_9, DayTime(4, 14, 0, 16, 0)), (TermWeek(MI, 1),))
        self.assertEqual(str(p), "Mi1 Th 2-4 Th 9")

    def test_day_and_week_merge_end_to_end(self) -> None:
        starts = [datetime(2014, 10, 9, 9, 0), datetime(2014, 10, 13, 9, 0)]
        merged = merge_patterns(occurrence(s) for s in starts)
        self.assertEqual([str(p) for p in merged], ["Mi1 M,Th 9"])


class TestFromInstants(unittest.TestCase):
    def test_converts_into_time_zone(self) -> None:
        start = datetime(2014, 10, 9, 8, 0, tzinfo=timezone.utc)
        p = Pattern.from_instants(start, start + timedelta(hours=1), calendar=CALENDAR, tz=ZoneInfo("Europe/London"))
        self.assertEqual(str(p), "Mi1 Th 9")

    def test_naive_instants_are_used_as_is(self) -> None:
        start = datetime(2014, 10, 9, 8, 0)
        p = Pattern.from_instants(start, start + timedelta(hours=1), calendar=CALENDAR, tz=ZoneInfo("Europe/London"))
        self.assertEqual(str(p), "Mi1 Th 8")


class TestFullPattern(unittest.TestCase):
    def test_collects_and_joins_patterns(self) -> None:
        fp = FullPattern(calendar=CALENDAR)
        for i in range(3):
            start = datetime(2014, 10, 9, 9, 0) + timedelta(weeks=i)
            fp.add(start, start + timedelta(hours=1))
        start = datetime(2015, 1, 20, 14, 0)
        fp.add(start, start + timedelta(hours=2))

        self.assertEqual(len(fp), 2)
        self.assertEqual(str(fp), "Mi1-3 Th 9; Le1 Tu 2-4")

    def test_empty(self) -> None:
        self.assertEqual(str(FullPattern(calendar=CALENDAR)), "")


if __name__ == "__main__":
    unittest.main()
