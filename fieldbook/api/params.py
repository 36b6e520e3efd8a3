"""Parsing of date/time query parameters and body timestamps into UTC intervals."""
from __future__ import annotations

import datetime as _dt
from typing import Optional

from fieldbook.core.exceptions import ValidationError
from fieldbook.scheduling.interval import Interval, month_window, validate


def to_utc(value: _dt.datetime, tz: _dt.tzinfo) -> _dt.datetime:
    """Naive timestamps are read as local time (``tz``); everything is returned in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(_dt.timezone.utc)


def body_interval(start: _dt.datetime, end: _dt.datetime, tz: _dt.tzinfo) -> Interval:
    return Interval(to_utc(start, tz), to_utc(end, tz))


def parse_bound(raw: str, tz: _dt.tzinfo, *, is_end: bool = False) -> _dt.datetime:
    """Parse YYYY-MM-DD or an ISO timestamp.

    A bare end date includes that whole day (the bound becomes the next midnight).
    """
    raw = (raw or "").strip()
    try:
        if len(raw) == 10:
            day = _dt.date.fromisoformat(raw)
            if is_end:
                day += _dt.timedelta(days=1)
            return _dt.datetime.combine(day, _dt.time(0, 0), tzinfo=tz).astimezone(_dt.timezone.utc)
        return to_utc(_dt.datetime.fromisoformat(raw), tz)
    except ValueError:
        raise ValidationError(
            "Invalid date format. Use YYYY-MM-DD or an ISO 8601 timestamp.",
            details={"value": raw},
        ) from None


def query_window(
    start_date: Optional[str],
    end_date: Optional[str],
    tz: _dt.tzinfo,
    default_days: int,
    now: _dt.datetime,
) -> Interval:
    """Window for list endpoints; defaults to today (local) + ``default_days``."""
    if start_date:
        start = parse_bound(start_date, tz)
    else:
        today = now.astimezone(tz).date()
        start = _dt.datetime.combine(today, _dt.time(0, 0), tzinfo=tz).astimezone(_dt.timezone.utc)
    if end_date:
        end = parse_bound(end_date, tz, is_end=True)
    else:
        end = start + _dt.timedelta(days=default_days)
    return validate(Interval(start, end))


def parse_month(raw: Optional[str], tz: _dt.tzinfo, now: _dt.datetime) -> Interval:
    """Month window from "YYYY-MM"; defaults to the current local month."""
    if not raw:
        local = now.astimezone(tz)
        return month_window(local.year, local.month, tz)
    try:
        year_s, month_s = raw.strip().split("-")
        year, month = int(year_s), int(month_s)
        if not 1 <= month <= 12:
            raise ValueError(raw)
    except ValueError:
        raise ValidationError("Invalid month. Use YYYY-MM.", details={"month": raw}) from None
    return month_window(year, month, tz)
