from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_month
from ..core.constants import HOURS_PRECISION
from ..core.context import RequestContext
from ..shifts import calculator
from ..shifts.model import resolve_schedule


@dataclass(frozen=True)
class MonthlyAttendanceReport:
    month_name: str
    rows: list[dict]
    total_employees: int
    total_late_arrivals: int
    total_overtime_hours: float
    avg_late_minutes: int


class AttendanceReportService:
    """Per-employee monthly totals: days, hours, late arrivals and overtime."""

    def __init__(self, attendance: AttendanceRepository, *, tz: Optional[tzinfo] = None):
        self._attendance = attendance
        self._tz = tz

    def build_monthly_report(self, ctx: RequestContext, *, year: int, month: int) -> MonthlyAttendanceReport:
        ctx.require_admin_or_hr()
        month, year = require_month(month, year)
        start, end = month_bounds(year, month)

        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end)

        summary_map: dict[int, dict] = {}
        for r in query_rows:
            schedule = resolve_schedule(r.working_hours_start, r.working_hours_end)

            s = summary_map.get(r.employee_id)
            if not s:
                s = {
                    "employee_id": r.employee_id,
                    "employee_name": r.employee_name,
                    "employee_code": r.employee_code,
                    "department": r.department_name or "-",
                    "working_hours_start": schedule.start_time.strftime("%H:%M"),
                    "working_hours_end": schedule.end_time.strftime("%H:%M"),
                    "total_days": 0,
                    "total_hours": 0.0,
                    "late_arrivals": 0,
                    "total_late_minutes": 0,
                    "total_overtime_hours": 0.0,
                }
                summary_map[r.employee_id] = s

            s["total_days"] += 1
            s["total_hours"] += r.total_hours or 0

            late = calculator.late_minutes(r.clock_in, schedule.start_time, end_time=schedule.end_time, tz=self._tz)
            if late > 0:
                s["late_arrivals"] += 1
                s["total_late_minutes"] += late

            s["total_overtime_hours"] += calculator.overtime_hours(
                r.total_hours,
                schedule.start_time,
                schedule.end_time,
                clocked_out=r.clock_out is not None,
            )

        rows = list(summary_map.values())
        for s in rows:
            s["total_hours"] = round(s["total_hours"], HOURS_PRECISION)
            s["total_overtime_hours"] = round(s["total_overtime_hours"], HOURS_PRECISION)

        rows.sort(key=lambda x: (x["late_arrivals"], x["total_overtime_hours"]), reverse=True)

        total_late_arrivals = sum(s["late_arrivals"] for s in rows)
        total_late_minutes = sum(s["total_late_minutes"] for s in rows)
        total_overtime = sum(s["total_overtime_hours"] for s in rows)

        return MonthlyAttendanceReport(
            month_name=start.strftime("%B %Y"),
            rows=rows,
            total_employees=len(rows),
            total_late_arrivals=total_late_arrivals,
            total_overtime_hours=round(total_overtime, HOURS_PRECISION),
            avg_late_minutes=round(total_late_minutes / total_late_arrivals) if total_late_arrivals else 0,
        )
