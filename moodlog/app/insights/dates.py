"""Calendar-day helpers shared by the streak and aggregation code.

A day key is a plain :class:`datetime.date` in a single reference calendar.
Aware timestamps are converted into that calendar before truncation, naive
ones are assumed to already be expressed in it.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta, tzinfo

DayKey = date


def to_day_key(value: datetime | date | str, tz: tzinfo | None = None) -> DayKey:
    """Collapse a timestamp (or ISO date string) to its calendar day."""

    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            return to_day_key(datetime.fromisoformat(text), tz)
        return date.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            # astimezone(None) converts into the host's local zone
            value = value.astimezone(tz)
        return value.date()
    return value


def today(tz: tzinfo | None = None) -> DayKey:
    return datetime.now(tz).date()


def is_today(key: DayKey, *, today: DayKey) -> bool:
    return key == today


def days_between(a: DayKey, b: DayKey) -> int:
    """Signed number of whole days from ``a`` to ``b``."""

    return (b - a).days


def yesterday(key: DayKey) -> DayKey:
    return key - timedelta(days=1)


def iter_days(start: DayKey, end: DayKey) -> Iterator[DayKey]:
    """Yield every day in ``[start, end]`` in chronological order."""

    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_bounds(key: DayKey) -> tuple[DayKey, DayKey]:
    """Return the Sunday..Saturday week containing ``key``."""

    # date.weekday(): Monday == 0 ... Sunday == 6
    offset = (key.weekday() + 1) % 7
    start = key - timedelta(days=offset)
    return start, start + timedelta(days=6)


def recent_window(end: DayKey, days: int) -> tuple[DayKey, DayKey]:
    """Return the ``days``-long window ending on ``end`` (inclusive)."""

    span = max(days, 1)
    return end - timedelta(days=span - 1), end
