from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..common.datetime_utils import hours_between
from ..core.constants import HOURS_PRECISION
from .model import AttendanceBreak


def total_break_hours(breaks: Iterable[AttendanceBreak]) -> float:
    """Closed breaks only; an open break has no duration yet."""
    return sum(hours_between(b.pause_time, b.resume_time) for b in breaks if b.resume_time is not None)


def worked_hours(clock_in: datetime, clock_out: datetime, breaks: Iterable[AttendanceBreak]) -> float:
    """Net hours between clock-in and clock-out, open breaks ending at clock-out.

    Breaks are clipped to the worked span, so a break outside it subtracts nothing.
    """
    gross = hours_between(clock_in, clock_out)
    break_hours = 0.0
    for b in breaks:
        start = max(b.pause_time, clock_in)
        end = min(b.resume_time or clock_out, clock_out)
        if end > start:
            break_hours += hours_between(start, end)
    return round(max(0.0, gross - break_hours), HOURS_PRECISION)
