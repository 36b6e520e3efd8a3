"""Half-open time interval [start, end) and the pure operations on it."""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import List, Optional

from fieldbook.core.exceptions import InvalidIntervalError


@dataclass(frozen=True)
class Interval:
    """A half-open range of timezone-aware instants.

    Construction does not validate; call ``validate`` (or build with
    ``Interval.of``) before trusting ``start < end``.
    """

    start: _dt.datetime
    end: _dt.datetime

    @classmethod
    def of(cls, start: _dt.datetime, end: _dt.datetime) -> Interval:
        return validate(cls(start, end))

    @property
    def duration(self) -> _dt.timedelta:
        return self.end - self.start

    def overlaps(self, other: Interval) -> bool:
        return overlaps(self, other)

    def contains(self, point: _dt.datetime) -> bool:
        return contains(self, point)

    def clip(self, window: Interval) -> Optional[Interval]:
        """Intersection with ``window``, or None when they do not overlap."""
        if not overlaps(self, window):
            return None
        return Interval(max(self.start, window.start), min(self.end, window.end))

    def to_dict(self) -> dict:
        return {"startTime": self.start.isoformat(), "endTime": self.end.isoformat()}


def overlaps(a: Interval, b: Interval) -> bool:
    """True iff the intervals share at least one instant. Touching ends do not overlap."""
    return a.start < b.end and b.start < a.end


def contains(a: Interval, point: _dt.datetime) -> bool:
    return a.start <= point < a.end


def validate(a: Interval) -> Interval:
    """Return ``a`` unchanged, or raise InvalidIntervalError."""
    if a.start.tzinfo is None or a.end.tzinfo is None:
        raise InvalidIntervalError(
            "Interval bounds must be timezone-aware",
            details={"startTime": a.start.isoformat(), "endTime": a.end.isoformat()},
        )
    if a.start >= a.end:
        raise InvalidIntervalError(
            "Start time must be before end time",
            details={"startTime": a.start.isoformat(), "endTime": a.end.isoformat()},
        )
    return a


def days_touched(a: Interval, tz: _dt.tzinfo) -> List[_dt.date]:
    """Calendar dates (in ``tz``) that the interval covers.

    An interval ending exactly at local midnight does not touch the next day.
    """
    start_local = a.start.astimezone(tz)
    end_local = a.end.astimezone(tz)
    first = start_local.date()
    last = end_local.date()
    if end_local.time() == _dt.time(0, 0) and last > first:
        last -= _dt.timedelta(days=1)
    days: List[_dt.date] = []
    cursor = first
    while cursor <= last:
        days.append(cursor)
        cursor += _dt.timedelta(days=1)
    return days


def month_window(year: int, month: int, tz: _dt.tzinfo) -> Interval:
    """Interval covering a calendar month in ``tz``: [1st 00:00, next 1st 00:00)."""
    start = _dt.datetime(year, month, 1, tzinfo=tz)
    if month == 12:
        end = _dt.datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = _dt.datetime(year, month + 1, 1, tzinfo=tz)
    return Interval(start, end)
