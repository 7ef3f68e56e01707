"""Datetime utilities for local wall-clock handling.

Tasks are scheduled in local time only, so every datetime in taskline is
naive. This module keeps the conversions to and from text in one place.
"""

from datetime import datetime, timedelta
from typing import Optional


# Largest unit first; the first unit that divides an interval exactly wins.
INTERVAL_UNITS = [
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def now_local() -> datetime:
    """Return the current local wall-clock time, truncated to the second."""
    return datetime.now().replace(microsecond=0)


def ensure_naive(dt: Optional[datetime]) -> Optional[datetime]:
    """Drop timezone info, converting aware datetimes to local time first.

    Args:
        dt: Datetime to normalize, or None

    Returns:
        Naive local datetime, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)

    return dt


def to_iso_string(dt: datetime) -> str:
    """Convert datetime to the ISO text used in the command log.

    Minutes precision is used unless the value carries seconds, so that
    ``2024-12-01T10:00`` survives a save/reload unchanged.
    """
    dt = ensure_naive(dt)
    if dt.second or dt.microsecond:
        return dt.isoformat(timespec="seconds")
    return dt.isoformat(timespec="minutes")


def format_display(dt: datetime, date_format: Optional[str] = None,
                   time_format: Optional[str] = None) -> str:
    """Format a datetime for humans (medium date, short time).

    With no formats given this renders ``Dec 1, 2024, 10:00 AM``. Explicit
    strftime formats from the config override either half.
    """
    if date_format:
        date_part = dt.strftime(date_format)
    else:
        date_part = f"{dt:%b} {dt.day}, {dt.year}"

    if time_format:
        time_part = dt.strftime(time_format)
    else:
        hour = dt.hour % 12 or 12
        time_part = f"{hour}:{dt:%M} {'AM' if dt.hour < 12 else 'PM'}"

    return f"{date_part}, {time_part}"


def round_to_seconds(delta: timedelta) -> timedelta:
    """Round a duration to the nearest whole second (half rounds up).

    Adds 500ms and truncates, which absorbs sub-second parser noise.
    """
    millis = delta // timedelta(milliseconds=1)
    return timedelta(seconds=(millis + 500) // 1000)


def split_interval(delta: timedelta) -> tuple:
    """Return ``(count, unit)`` for the largest unit dividing ``delta`` exactly."""
    total = int(delta.total_seconds())
    for unit, size in INTERVAL_UNITS:
        if total % size == 0:
            return total // size, unit
    return total, "second"


def format_interval(delta: timedelta) -> str:
    """Render an interval as ``3 days``, ``1 week``, ``90 seconds`` and so on."""
    count, unit = split_interval(delta)
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"
