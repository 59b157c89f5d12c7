from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, WorkMode
from .model import AttendanceBreak, AttendanceRecord, AttendanceReportRow, GeoLocation


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """Record of work_date that has no clock-out yet."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
        work_mode: Optional[WorkMode] = None,
        location: Optional[GeoLocation] = None,
    ) -> int:
        raise NotImplementedError

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        total_hours: float,
        location: Optional[GeoLocation] = None,
    ) -> bool:
        raise NotImplementedError

    def get_open_break(self, attendance_id: int) -> Optional[AttendanceBreak]:
        raise NotImplementedError

    def list_breaks(self, attendance_id: int) -> Sequence[AttendanceBreak]:
        raise NotImplementedError

    def create_break(self, *, attendance_id: int, pause_time: datetime) -> int:
        raise NotImplementedError

    def close_break(self, *, break_id: int, resume_time: datetime) -> bool:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
