from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus, WorkMode


@dataclass(frozen=True)
class GeoLocation:
    """Where a clock-in or clock-out was made, as reported by the client."""

    latitude: float
    longitude: float
    name: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one work date."""

    attendance_id: int
    employee_id: int
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime]
    total_hours: Optional[float]
    status: AttendanceStatus
    notes: Optional[str] = None
    work_mode: Optional[WorkMode] = None
    clock_in_location: Optional[GeoLocation] = None
    clock_out_location: Optional[GeoLocation] = None

    @property
    def state(self) -> AttendanceState:
        if self.clock_out is None:
            return AttendanceState.CLOCKED_IN
        return AttendanceState.CLOCKED_OUT


@dataclass(frozen=True)
class AttendanceBreak:
    break_id: int
    attendance_id: int
    pause_time: datetime
    resume_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.resume_time is None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model joining a record with the employee's profile (reports)."""

    employee_id: int
    employee_name: str
    employee_code: str
    department_name: Optional[str]
    working_hours_start: Optional[time]
    working_hours_end: Optional[time]
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    total_hours: Optional[float]
    status: AttendanceStatus
