from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Optional

import pytest

from src.hr_timekeeping.hr_timekeeping.attendance.model import AttendanceBreak, AttendanceRecord, AttendanceReportRow
from src.hr_timekeeping.hr_timekeeping.core.context import RequestContext
from src.hr_timekeeping.hr_timekeeping.core.enums import LeaveStatus, PayrollStatus, Role
from src.hr_timekeeping.hr_timekeeping.leaves.model import LeaveRequest, LeaveType
from src.hr_timekeeping.hr_timekeeping.payroll.model import PayrollRecord, SalaryStructure
from src.hr_timekeeping.hr_timekeeping.shifts.model import ShiftSchedule


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self.breaks: dict[int, AttendanceBreak] = {}
        self.report_rows: list[AttendanceReportRow] = []
        self._id = 0
        self._break_id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self.records[record.attendance_id] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def get_open_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        r = self.get_for_employee_and_date(employee_id, work_date)
        return r if r and r.clock_out is None else None

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date):
        items = [
            r for r in self.records.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date
        ]
        return sorted(items, key=lambda r: r.work_date, reverse=True)

    def create_clock_in(
        self, *, employee_id, work_date, clock_in, status, notes=None, work_mode=None, location=None
    ) -> int:
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_out=None,
            total_hours=None,
            status=status,
            notes=notes,
            work_mode=work_mode,
            clock_in_location=location,
        )
        return self._id

    def update_clock_out(self, *, attendance_id: int, clock_out: datetime, total_hours: float, location=None) -> bool:
        r = self.records.get(attendance_id)
        if not r or r.clock_out is not None:
            return False
        self.records[attendance_id] = dataclasses.replace(
            r, clock_out=clock_out, total_hours=total_hours, clock_out_location=location
        )
        return True

    def get_open_break(self, attendance_id: int) -> Optional[AttendanceBreak]:
        return next((b for b in self.list_breaks(attendance_id) if b.is_open), None)

    def list_breaks(self, attendance_id: int):
        return [b for b in self.breaks.values() if b.attendance_id == attendance_id]

    def create_break(self, *, attendance_id: int, pause_time: datetime) -> int:
        self._break_id += 1
        self.breaks[self._break_id] = AttendanceBreak(
            break_id=self._break_id, attendance_id=attendance_id, pause_time=pause_time
        )
        return self._break_id

    def close_break(self, *, break_id: int, resume_time: datetime) -> bool:
        b = self.breaks.get(break_id)
        if not b or not b.is_open:
            return False
        self.breaks[break_id] = dataclasses.replace(b, resume_time=resume_time)
        return True

    def get_report_rows(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None):
        return [
            r for r in self.report_rows
            if start_date <= r.work_date <= end_date and (employee_id is None or r.employee_id == employee_id)
        ]


class InMemorySchedules:
    def __init__(self, schedules: Optional[dict[int, ShiftSchedule]] = None):
        self.schedules = schedules or {}

    def get_for_employee(self, employee_id: int) -> Optional[ShiftSchedule]:
        return self.schedules.get(employee_id)


class InMemoryPayroll:
    def __init__(self):
        self.structures: dict[int, SalaryStructure] = {}
        self.records: dict[int, PayrollRecord] = {}
        self._id = 0

    def list_salary_structures(self):
        return list(self.structures.values())

    def upsert_salary_structure(self, structure: SalaryStructure) -> None:
        self.structures[structure.employee_id] = structure

    def exists_for_period(self, *, month: int, year: int) -> bool:
        return any(r.month == month and r.year == year for r in self.records.values())

    def insert_records(self, records) -> int:
        for r in records:
            self._id += 1
            self.records[self._id] = dataclasses.replace(r, payroll_id=self._id)
        return len(records)

    def get_record(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self.records.get(payroll_id)

    def list_records(self, *, month=None, year=None):
        return [
            r for r in self.records.values()
            if (month is None or r.month == month) and (year is None or r.year == year)
        ]

    def update_status(self, *, payroll_ids, status: PayrollStatus, paid_at) -> int:
        for payroll_id in payroll_ids:
            self.records[payroll_id] = dataclasses.replace(self.records[payroll_id], status=status, paid_at=paid_at)
        return len(payroll_ids)


class InMemoryLeaves:
    def __init__(self, leave_types: Optional[list[LeaveType]] = None):
        self.leave_types = {lt.leave_type_id: lt for lt in (leave_types or [])}
        self.requests: dict[int, LeaveRequest] = {}
        self._id = 0

    def list_leave_types(self):
        return list(self.leave_types.values())

    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        return self.leave_types.get(leave_type_id)

    def create_request(self, *, employee_id, leave_type_id, start_date, end_date, days_count, reason) -> int:
        self._id += 1
        self.requests[self._id] = LeaveRequest(
            request_id=self._id,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            days_count=days_count,
            status=LeaveStatus.PENDING,
            created_at=datetime(2024, 1, 1, 9, 0),
            reason=reason,
        )
        return self._id

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        return self.requests.get(request_id)

    def list_requests(self, *, employee_id=None, status=None, limit=200):
        items = [
            r for r in self.requests.values()
            if (employee_id is None or r.employee_id == employee_id) and (status is None or r.status == status)
        ]
        return items[:limit]

    def used_days_by_type(self, *, employee_id: int, year: int) -> dict[int, int]:
        used: dict[int, int] = {}
        for r in self.requests.values():
            if r.employee_id == employee_id and r.status == LeaveStatus.APPROVED and r.start_date.year == year:
                used[r.leave_type_id] = used.get(r.leave_type_id, 0) + r.days_count
        return used

    def decide(self, *, request_id: int, status: LeaveStatus, reviewed_by) -> bool:
        r = self.requests.get(request_id)
        if not r or r.status != LeaveStatus.PENDING:
            return False
        self.requests[request_id] = dataclasses.replace(r, status=status, reviewed_by=reviewed_by)
        return True

    def status_counts(self) -> dict[LeaveStatus, int]:
        counts: dict[LeaveStatus, int] = {}
        for r in self.requests.values():
            counts[r.status] = counts.get(r.status, 0) + 1
        return counts


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 15, 9, 0)


@pytest.fixture
def employee_ctx() -> RequestContext:
    return RequestContext(user_id="u-7", role=Role.EMPLOYEE, employee_id=7)


@pytest.fixture
def hr_ctx() -> RequestContext:
    return RequestContext(user_id="u-1", role=Role.HR, employee_id=1)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def schedules_repo() -> InMemorySchedules:
    return InMemorySchedules()


@pytest.fixture
def payroll_repo() -> InMemoryPayroll:
    return InMemoryPayroll()


@pytest.fixture
def leave_repo() -> InMemoryLeaves:
    return InMemoryLeaves(
        [
            LeaveType(leave_type_id=1, name="Annual", days_per_year=12),
            LeaveType(leave_type_id=2, name="Sick", days_per_year=5),
        ]
    )
