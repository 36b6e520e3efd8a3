"""Tests for the half-open Interval and its helpers.

Covers:
- overlaps symmetry and the touching-endpoint boundary
- validate (ordering and timezone-awareness)
- clip / contains
- days_touched and month_window in a local timezone
"""
from __future__ import annotations

import datetime as _dt
import itertools
import unittest
from zoneinfo import ZoneInfo

from fieldbook.core.exceptions import InvalidIntervalError, ValidationError
from fieldbook.scheduling.interval import (
    Interval,
    contains,
    days_touched,
    month_window,
    overlaps,
    validate,
)

UTC = _dt.timezone.utc
LIMA = ZoneInfo("America/Lima")


def _t(hour: int, minute: int = 0, day: int = 2) -> _dt.datetime:
    return _dt.datetime(2026, 11, day, hour, minute, tzinfo=UTC)


def _iv(h1: int, h2: int) -> Interval:
    return Interval(_t(h1), _t(h2))


class TestOverlaps(unittest.TestCase):
    def test_symmetry(self):
        samples = [_iv(8, 9), _iv(8, 10), _iv(9, 10), _iv(9, 12), _iv(10, 11), _iv(7, 13)]
        for a, b in itertools.product(samples, repeat=2):
            self.assertEqual(overlaps(a, b), overlaps(b, a), (a, b))

    def test_touching_endpoints_do_not_overlap(self):
        a = _iv(9, 10)
        after = Interval(a.end, a.end + _dt.timedelta(seconds=1))
        before = Interval(a.start - _dt.timedelta(seconds=1), a.start)
        self.assertFalse(overlaps(a, after))
        self.assertFalse(overlaps(a, before))

    def test_partial_and_nested_overlap(self):
        self.assertTrue(overlaps(_iv(9, 10), Interval(_t(9, 30), _t(11))))
        self.assertTrue(overlaps(_iv(8, 12), _iv(9, 10)))
        self.assertTrue(_iv(9, 10).overlaps(_iv(9, 10)))

    def test_disjoint(self):
        self.assertFalse(overlaps(_iv(8, 9), _iv(10, 11)))


class TestValidate(unittest.TestCase):
    def test_returns_interval_when_ordered(self):
        a = _iv(9, 10)
        self.assertIs(validate(a), a)
        self.assertEqual(Interval.of(_t(9), _t(10)), a)

    def test_empty_interval_rejected(self):
        with self.assertRaises(InvalidIntervalError) as ctx:
            validate(Interval(_t(9), _t(9)))
        self.assertEqual(ctx.exception.code, "INVALID_INTERVAL")
        self.assertEqual(ctx.exception.http_status, 400)

    def test_reversed_interval_rejected(self):
        with self.assertRaises(ValidationError):
            Interval.of(_t(10), _t(9))

    def test_naive_bounds_rejected(self):
        naive = _dt.datetime(2026, 11, 2, 9)
        with self.assertRaises(InvalidIntervalError):
            validate(Interval(naive, naive + _dt.timedelta(hours=1)))


class TestClipAndContains(unittest.TestCase):
    def test_contains_is_half_open(self):
        a = _iv(9, 10)
        self.assertTrue(contains(a, _t(9)))
        self.assertTrue(a.contains(_t(9, 59)))
        self.assertFalse(contains(a, _t(10)))

    def test_clip_to_window(self):
        self.assertEqual(_iv(8, 12).clip(_iv(10, 14)), _iv(10, 12))
        self.assertIsNone(_iv(8, 9).clip(_iv(9, 10)))

    def test_duration_and_dict(self):
        a = _iv(9, 11)
        self.assertEqual(a.duration, _dt.timedelta(hours=2))
        self.assertEqual(a.to_dict()["startTime"], "2026-11-02T09:00:00+00:00")


class TestCalendarProjection(unittest.TestCase):
    def test_single_day(self):
        a = Interval(
            _dt.datetime(2026, 11, 2, 8, tzinfo=LIMA),
            _dt.datetime(2026, 11, 2, 9, tzinfo=LIMA),
        )
        self.assertEqual(days_touched(a, LIMA), [_dt.date(2026, 11, 2)])

    def test_end_at_local_midnight_excludes_next_day(self):
        a = Interval(
            _dt.datetime(2026, 11, 2, 22, tzinfo=LIMA),
            _dt.datetime(2026, 11, 3, 0, tzinfo=LIMA),
        )
        self.assertEqual(days_touched(a, LIMA), [_dt.date(2026, 11, 2)])

    def test_multi_day_span(self):
        a = Interval(
            _dt.datetime(2026, 11, 2, 22, tzinfo=LIMA),
            _dt.datetime(2026, 11, 4, 1, tzinfo=LIMA),
        )
        self.assertEqual(
            days_touched(a, LIMA),
            [_dt.date(2026, 11, 2), _dt.date(2026, 11, 3), _dt.date(2026, 11, 4)],
        )

    def test_days_follow_local_timezone(self):
        # 02:00 UTC on the 3rd is still the 2nd in Lima (UTC-5)
        a = Interval(_t(2, day=3), _t(3, day=3))
        self.assertEqual(days_touched(a, LIMA), [_dt.date(2026, 11, 2)])
        self.assertEqual(days_touched(a, UTC), [_dt.date(2026, 11, 3)])

    def test_month_window(self):
        w = month_window(2026, 12, LIMA)
        self.assertEqual(w.start, _dt.datetime(2026, 12, 1, tzinfo=LIMA))
        self.assertEqual(w.end, _dt.datetime(2027, 1, 1, tzinfo=LIMA))
        self.assertEqual(month_window(2026, 2, UTC).duration, _dt.timedelta(days=28))


if __name__ == "__main__":
    unittest.main()
