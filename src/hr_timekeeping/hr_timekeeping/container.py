from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, Mapping, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .reports.service import AttendanceReportService
from .shifts.mysql_shift_repository import MySQLShiftScheduleRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    tz: Optional[tzinfo]

    attendance_service: AttendanceService
    attendance_report_service: AttendanceReportService
    payroll_service: PayrollService
    leave_service: LeaveService


def build_container(*, db_config: Mapping[str, Any], tz: Optional[tzinfo] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLShiftScheduleRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)

    return Container(
        conn=conn,
        tz=tz,
        attendance_service=AttendanceService(
            attendance_repo,
            schedules_repo,
            strategy_factory=AttendanceStrategyFactory(),
            tz=tz,
        ),
        attendance_report_service=AttendanceReportService(attendance_repo, tz=tz),
        payroll_service=PayrollService(payroll_repo, calculator=StandardPayrollCalculator(), tz=tz),
        leave_service=LeaveService(leave_repo),
    )
