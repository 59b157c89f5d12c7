from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import hours_between, local_wall_clock, month_bounds, now_local
from ..common.validators import require_month
from ..core.constants import HOURS_PRECISION
from ..core.context import RequestContext
from ..core.enums import WorkMode
from ..core.exceptions import ValidationError
from ..shifts import calculator
from ..shifts.model import ShiftSchedule
from ..shifts.reminders import Reminder, due_reminders
from ..shifts.repository import ShiftScheduleRepository
from .breaks import worked_hours
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, GeoLocation
from .repository import AttendanceRepository
from .state import ensure_can_clock_in, ensure_can_clock_out, ensure_can_pause, ensure_can_resume

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockOutAssessment:
    """What the UI should warn about before an employee clocks out."""

    hours_worked: float
    expected_hours: float
    shift_end: datetime
    before_end_time: bool
    insufficient_hours: bool
    possible_missed_clock_out: bool

    @property
    def is_early(self) -> bool:
        return self.before_end_time or self.insufficient_hours


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ShiftScheduleRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        tz: tzinfo | None = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._tz = tz

    def schedule_for(self, employee_id: int) -> ShiftSchedule:
        return self._schedules.get_for_employee(employee_id) or ShiftSchedule.default()

    def _now(self, now: datetime | None) -> datetime:
        """Naive local wall-clock time, the form clock_in/clock_out are stored in."""
        if now is None:
            return now_local(self._tz)
        return local_wall_clock(now, self._tz)

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        """Today's record, else yesterday's record still open (cross-midnight shifts)."""
        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record:
            return record
        return self._attendance.get_open_for_employee_and_date(employee_id, today - timedelta(days=1))

    def clock_in(
        self,
        ctx: RequestContext,
        *,
        now: datetime | None = None,
        work_mode: WorkMode | None = None,
        location: GeoLocation | None = None,
    ) -> AttendanceRecord:
        employee_id = ctx.require_employee()
        now = self._now(now)
        today = now.date()

        ensure_can_clock_in(self.get_today_record(employee_id, today))

        schedule = self.schedule_for(employee_id)
        late = calculator.late_minutes(now, schedule.start_time, end_time=schedule.end_time, tz=self._tz)
        decision = self._factory.for_clock_in(late_minutes=late).decide_clock_in(
            now=now, schedule=schedule, late_minutes=late
        )

        attendance_id = self._attendance.create_clock_in(
            employee_id=employee_id,
            work_date=today,
            clock_in=now,
            status=decision.status,
            notes=decision.note,
            work_mode=work_mode,
            location=location,
        )
        logger.info("Employee %s clocked in at %s (%s)", employee_id, now.isoformat(), decision.status.value)

        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=today,
            clock_in=now,
            clock_out=None,
            total_hours=None,
            status=decision.status,
            notes=decision.note,
            work_mode=work_mode,
            clock_in_location=location,
        )

    def clock_out(
        self,
        ctx: RequestContext,
        *,
        now: datetime | None = None,
        corrected_time: time | None = None,
        location: GeoLocation | None = None,
    ) -> AttendanceRecord:
        """Close the open record; the status set at clock-in is kept.

        corrected_time is the wall-clock time of a missed clock-out; it is placed
        on the clock-in's date, or the next day when that would precede the clock-in.
        It may not be in the future nor before a break of this record started.
        """
        employee_id = ctx.require_employee()
        now = self._now(now)

        record = ensure_can_clock_out(self.get_today_record(employee_id, now.date()))
        breaks = self._attendance.list_breaks(record.attendance_id)

        clock_out = now
        if corrected_time is not None:
            clock_out = record.clock_in.replace(
                hour=corrected_time.hour,
                minute=corrected_time.minute,
                second=0,
                microsecond=0,
            )
            if clock_out <= record.clock_in:
                clock_out += timedelta(days=1)
            if clock_out > now:
                raise ValidationError("Corrected clock-out time cannot be in the future")
            if any(b.pause_time > clock_out for b in breaks):
                raise ValidationError("Corrected clock-out time cannot be before a break started")

        total_hours = worked_hours(record.clock_in, clock_out, breaks)

        open_break = next((b for b in breaks if b.is_open), None)
        if open_break:
            self._attendance.close_break(break_id=open_break.break_id, resume_time=clock_out)

        if not self._attendance.update_clock_out(
            attendance_id=record.attendance_id,
            clock_out=clock_out,
            total_hours=total_hours,
            location=location,
        ):
            raise ValidationError("Clock-out failed")

        logger.info("Employee %s clocked out at %s (%.2f h)", employee_id, clock_out.isoformat(), total_hours)
        return dataclasses.replace(
            record, clock_out=clock_out, total_hours=total_hours, clock_out_location=location
        )

    def pause(self, ctx: RequestContext, *, now: datetime | None = None) -> int:
        employee_id = ctx.require_employee()
        now = self._now(now)

        record = self.get_today_record(employee_id, now.date())
        open_break = self._attendance.get_open_break(record.attendance_id) if record else None
        record = ensure_can_pause(record, open_break)

        return self._attendance.create_break(attendance_id=record.attendance_id, pause_time=now)

    def resume(self, ctx: RequestContext, *, now: datetime | None = None) -> None:
        employee_id = ctx.require_employee()
        now = self._now(now)

        record = self.get_today_record(employee_id, now.date())
        open_break = self._attendance.get_open_break(record.attendance_id) if record else None
        open_break = ensure_can_resume(record, open_break)

        if not self._attendance.close_break(break_id=open_break.break_id, resume_time=now):
            raise ValidationError("Resume failed")

    def assess_clock_out(self, ctx: RequestContext, *, now: datetime | None = None) -> ClockOutAssessment:
        employee_id = ctx.require_employee()
        now = self._now(now)

        record = ensure_can_clock_out(self.get_today_record(employee_id, now.date()))
        schedule = self.schedule_for(employee_id)

        hours_worked = hours_between(record.clock_in, now)
        expected = calculator.expected_hours(schedule.start_time, schedule.end_time)
        shift_end = calculator.resolve_shift_end(record.clock_in, schedule.start_time, schedule.end_time)
        before_end = now < shift_end

        return ClockOutAssessment(
            hours_worked=round(hours_worked, HOURS_PRECISION),
            expected_hours=expected,
            shift_end=shift_end,
            before_end_time=before_end,
            insufficient_hours=hours_worked < expected,
            possible_missed_clock_out=not before_end and hours_worked > expected,
        )

    def reminders(self, employee_id: int, *, now: datetime | None = None) -> list[Reminder]:
        now = self._now(now)
        record = self.get_today_record(employee_id, now.date())
        return due_reminders(now, self.schedule_for(employee_id), record)

    def history_rows(self, employee_id: int, *, start: date, end: date) -> list[dict]:
        schedule = self.schedule_for(employee_id)
        records = self._attendance.list_for_employee(employee_id, start_date=start, end_date=end)
        return [self._to_row(r, schedule) for r in records]

    def monthly_summary(self, employee_id: int, *, year: int, month: int) -> dict:
        month, year = require_month(month, year)
        start, end = month_bounds(year, month)
        schedule = self.schedule_for(employee_id)
        records = self._attendance.list_for_employee(employee_id, start_date=start, end_date=end)

        late_arrivals = [
            r for r in records
            if calculator.late_minutes(r.clock_in, schedule.start_time, end_time=schedule.end_time, tz=self._tz) > 0
        ]
        overtime = calculator.monthly_overtime(records, schedule.start_time, schedule.end_time)

        return {
            "employee_id": employee_id,
            "total_days": len(records),
            "total_hours": round(sum(r.total_hours or 0 for r in records), HOURS_PRECISION),
            "late_arrivals": len(late_arrivals),
            "overtime_hours": round(overtime, HOURS_PRECISION),
            "expected_hours_per_day": calculator.expected_hours(schedule.start_time, schedule.end_time),
        }

    def _to_row(self, r: AttendanceRecord, schedule: ShiftSchedule) -> dict:
        late = calculator.late_minutes(r.clock_in, schedule.start_time, end_time=schedule.end_time, tz=self._tz)
        overtime = calculator.overtime_hours(
            r.total_hours,
            schedule.start_time,
            schedule.end_time,
            clocked_out=r.clock_out is not None,
        )
        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "clock_in": r.clock_in.strftime("%H:%M:%S"),
            "clock_out": r.clock_out.strftime("%H:%M:%S") if r.clock_out else "-",
            "total_hours": r.total_hours,
            "status": r.status.value,
            "work_mode": r.work_mode.value if r.work_mode else None,
            "late_minutes": late,
            "late_label": calculator.format_late_duration(late) if late else "",
            "overtime_hours": round(overtime, HOURS_PRECISION),
        }
