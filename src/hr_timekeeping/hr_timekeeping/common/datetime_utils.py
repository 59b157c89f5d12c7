from __future__ import annotations

import calendar
from datetime import date, datetime, time, tzinfo
from typing import Optional, Union


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: Union[str, time]) -> time:
    """Parse a wall-clock "HH:MM" or "HH:MM:SS" value into time."""
    if isinstance(value, time):
        return value

    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)


def minutes_of_day(value: Union[time, datetime]) -> int:
    """Minutes since midnight, ignoring seconds."""
    return value.hour * 60 + value.minute


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def to_local(value: datetime, tz: Optional[tzinfo]) -> datetime:
    """Convert an aware timestamp to tz; naive values are already local."""
    if tz is None or value.tzinfo is None:
        return value
    return value.astimezone(tz)


def local_wall_clock(value: datetime, tz: Optional[tzinfo]) -> datetime:
    """Naive wall-clock time of value in tz, comparable with stored DATETIME values."""
    if value.tzinfo is None:
        return value
    return to_local(value, tz).replace(tzinfo=None)


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current wall-clock time in tz, naive like the DATETIME values we store.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if tz is None:
        return datetime.now()
    return datetime.now(tz).replace(tzinfo=None)
