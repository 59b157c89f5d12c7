from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...shifts.calculator import format_late_duration
from ...shifts.model import ShiftSchedule
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in."""

    def decide_clock_in(self, *, now: datetime, schedule: ShiftSchedule, late_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {format_late_duration(late_minutes)}")
