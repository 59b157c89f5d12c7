"""Guarded transitions of the daily attendance lifecycle.

NOT_STARTED -> CLOCKED_IN -> CLOCKED_OUT. Breaks can only be taken while
clocked in, one at a time.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceState
from ..core.exceptions import InvalidTransitionError
from .model import AttendanceBreak, AttendanceRecord


def attendance_state(record: Optional[AttendanceRecord]) -> AttendanceState:
    if record is None:
        return AttendanceState.NOT_STARTED
    return record.state


def ensure_can_clock_in(record: Optional[AttendanceRecord]) -> None:
    state = attendance_state(record)
    if state == AttendanceState.CLOCKED_IN:
        raise InvalidTransitionError("You are already clocked in")
    if state == AttendanceState.CLOCKED_OUT:
        raise InvalidTransitionError("You have already clocked out for today")


def ensure_can_clock_out(record: Optional[AttendanceRecord]) -> AttendanceRecord:
    if attendance_state(record) != AttendanceState.CLOCKED_IN:
        raise InvalidTransitionError("No active clock-in found")
    return record


def ensure_can_pause(record: Optional[AttendanceRecord], open_break: Optional[AttendanceBreak]) -> AttendanceRecord:
    record = ensure_can_clock_out(record)
    if open_break is not None:
        raise InvalidTransitionError("A break is already in progress")
    return record


def ensure_can_resume(record: Optional[AttendanceRecord], open_break: Optional[AttendanceBreak]) -> AttendanceBreak:
    ensure_can_clock_out(record)
    if open_break is None:
        raise InvalidTransitionError("There is no break to resume")
    return open_break
