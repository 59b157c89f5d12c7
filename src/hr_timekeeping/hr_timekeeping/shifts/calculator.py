"""Shift-time accounting.

Pure functions over a schedule's time-of-day window: scheduled shift end,
expected hours, overtime and late arrival. Cross-midnight shifts are
windows whose end is at or before their start.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import minutes_of_day, to_local
from ..core.constants import LATE_GRACE_MINUTES, MINUTES_PER_DAY


def is_cross_midnight(start_time: time, end_time: time) -> bool:
    return minutes_of_day(end_time) <= minutes_of_day(start_time)


def resolve_shift_end(reference_clock_in: datetime, start_time: time, end_time: time) -> datetime:
    """Scheduled end of the shift that reference_clock_in belongs to.

    The end is placed on the clock-in's calendar date and moved to the next
    day when the shift crosses midnight.
    """
    shift_end = reference_clock_in.replace(
        hour=end_time.hour,
        minute=end_time.minute,
        second=0,
        microsecond=0,
    )
    if is_cross_midnight(start_time, end_time):
        shift_end += timedelta(days=1)
    return shift_end


def expected_hours(start_time: time, end_time: time) -> float:
    """Contracted duration of one shift occurrence, in (0, 24] hours."""
    start_minutes = minutes_of_day(start_time)
    end_minutes = minutes_of_day(end_time)
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY
    return (end_minutes - start_minutes) / 60


def overtime_hours(
    total_hours_worked: Optional[float],
    start_time: time,
    end_time: time,
    *,
    clocked_out: bool = True,
) -> float:
    """Hours worked beyond the expected hours; 0 while the shift is open."""
    if not clocked_out or not total_hours_worked:
        return 0.0
    return max(0.0, float(total_hours_worked) - expected_hours(start_time, end_time))


def monthly_overtime(records: Iterable, start_time: time, end_time: time) -> float:
    """Sum of per-record overtime; records expose clock_out and total_hours."""
    return sum(
        overtime_hours(r.total_hours, start_time, end_time, clocked_out=r.clock_out is not None)
        for r in records
    )


def late_minutes(
    clock_in: Optional[datetime],
    start_time: time,
    *,
    end_time: Optional[time] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Minutes the clock-in follows the scheduled start.

    Only hour and minute are compared, so a difference of one minute or
    less is treated as on time. Passing end_time lets a post-midnight
    clock-in on a cross-midnight shift count against the previous
    evening's start.
    """
    if clock_in is None:
        return 0

    local = to_local(clock_in, tz)
    actual = minutes_of_day(local)
    scheduled = minutes_of_day(start_time)

    if (
        end_time is not None
        and is_cross_midnight(start_time, end_time)
        and actual < scheduled
        and actual <= minutes_of_day(end_time)
    ):
        actual += MINUTES_PER_DAY

    diff = actual - scheduled
    return diff if diff > LATE_GRACE_MINUTES else 0


def format_late_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"
