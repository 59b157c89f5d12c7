from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from src.hr_timekeeping.hr_timekeeping.attendance.model import AttendanceRecord, GeoLocation
from src.hr_timekeeping.hr_timekeeping.attendance.service import AttendanceService
from src.hr_timekeeping.hr_timekeeping.common.datetime_utils import now_local
from src.hr_timekeeping.hr_timekeeping.core.context import RequestContext
from src.hr_timekeeping.hr_timekeeping.core.enums import AttendanceState, AttendanceStatus, ReminderKind, Role, WorkMode
from src.hr_timekeeping.hr_timekeeping.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    ValidationError,
)
from src.hr_timekeeping.hr_timekeeping.shifts.model import ShiftSchedule

NIGHT = ShiftSchedule(start_time=time(22, 0), end_time=time(6, 0))


@pytest.fixture
def service(attendance_repo, schedules_repo) -> AttendanceService:
    return AttendanceService(attendance_repo, schedules_repo)


def _open_record(attendance_id: int, clock_in: datetime, employee_id: int = 7) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=attendance_id,
        employee_id=employee_id,
        work_date=clock_in.date(),
        clock_in=clock_in,
        clock_out=None,
        total_hours=None,
        status=AttendanceStatus.PRESENT,
    )


def test_clock_in_on_time(service, attendance_repo, employee_ctx, fixed_now):
    record = service.clock_in(employee_ctx, now=fixed_now, work_mode=WorkMode.WFO)

    assert record.status == AttendanceStatus.PRESENT
    assert record.state == AttendanceState.CLOCKED_IN
    assert record.work_mode == WorkMode.WFO
    assert attendance_repo.get_for_employee_and_date(7, fixed_now.date()) == record


def test_clock_in_late_uses_employee_schedule(service, schedules_repo, employee_ctx):
    schedules_repo.schedules[7] = ShiftSchedule(start_time=time(8, 0), end_time=time(17, 0))

    record = service.clock_in(employee_ctx, now=datetime(2024, 3, 15, 8, 15))

    assert record.status == AttendanceStatus.LATE
    assert record.notes == "Late by 15 min"


def test_clock_in_twice_is_rejected(service, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    with pytest.raises(InvalidTransitionError):
        service.clock_in(employee_ctx, now=fixed_now.replace(hour=10))


def test_clock_in_requires_employee_profile(service, fixed_now):
    ctx = RequestContext(user_id="admin", role=Role.ADMIN)
    with pytest.raises(AuthorizationError):
        service.clock_in(ctx, now=fixed_now)


def test_clock_out_after_clock_out_is_rejected(service, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    service.clock_out(employee_ctx, now=fixed_now.replace(hour=18))

    with pytest.raises(InvalidTransitionError):
        service.clock_out(employee_ctx, now=fixed_now.replace(hour=19))
    with pytest.raises(InvalidTransitionError):
        service.clock_in(employee_ctx, now=fixed_now.replace(hour=19))


def test_clock_out_subtracts_breaks(service, attendance_repo, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    service.pause(employee_ctx, now=fixed_now.replace(hour=12))
    service.resume(employee_ctx, now=fixed_now.replace(hour=13))

    record = service.clock_out(employee_ctx, now=fixed_now.replace(hour=18, minute=30))

    assert record.total_hours == 8.5
    assert record.state == AttendanceState.CLOCKED_OUT
    assert attendance_repo.records[record.attendance_id].total_hours == 8.5


def test_clock_out_closes_open_break(service, attendance_repo, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    break_id = service.pause(employee_ctx, now=fixed_now.replace(hour=17))

    record = service.clock_out(employee_ctx, now=fixed_now.replace(hour=18))

    assert record.total_hours == 8.0
    assert attendance_repo.breaks[break_id].resume_time == fixed_now.replace(hour=18)


def test_pause_twice_and_resume_without_break_are_rejected(service, employee_ctx, fixed_now):
    with pytest.raises(InvalidTransitionError):
        service.pause(employee_ctx, now=fixed_now)

    service.clock_in(employee_ctx, now=fixed_now)
    with pytest.raises(InvalidTransitionError):
        service.resume(employee_ctx, now=fixed_now.replace(hour=10))

    service.pause(employee_ctx, now=fixed_now.replace(hour=12))
    with pytest.raises(InvalidTransitionError):
        service.pause(employee_ctx, now=fixed_now.replace(hour=12, minute=5))


def test_cross_midnight_shift_is_closed_the_next_morning(service, schedules_repo, employee_ctx):
    schedules_repo.schedules[7] = NIGHT

    clocked_in = service.clock_in(employee_ctx, now=datetime(2024, 1, 1, 22, 30))
    assert clocked_in.status == AttendanceStatus.LATE

    record = service.clock_out(employee_ctx, now=datetime(2024, 1, 2, 6, 10))

    assert record.work_date == date(2024, 1, 1)
    assert record.total_hours == 7.67


def test_open_shift_from_yesterday_blocks_new_clock_in(service, attendance_repo, employee_ctx):
    attendance_repo.add(_open_record(1, datetime(2024, 1, 1, 22, 0)))

    assert service.get_today_record(7, date(2024, 1, 2)).attendance_id == 1
    with pytest.raises(InvalidTransitionError):
        service.clock_in(employee_ctx, now=datetime(2024, 1, 2, 1, 0))


def test_missed_clock_out_is_corrected_on_clock_in_date(service, attendance_repo, employee_ctx):
    attendance_repo.add(_open_record(1, datetime(2024, 3, 14, 9, 0)))

    record = service.clock_out(employee_ctx, now=datetime(2024, 3, 15, 8, 0), corrected_time=time(18, 0))

    assert record.clock_out == datetime(2024, 3, 14, 18, 0)
    assert record.total_hours == 9.0


def test_corrected_time_before_clock_in_rolls_to_next_day(service, attendance_repo, employee_ctx):
    attendance_repo.add(_open_record(1, datetime(2024, 3, 14, 22, 0)))

    record = service.clock_out(employee_ctx, now=datetime(2024, 3, 15, 9, 0), corrected_time=time(2, 0))

    assert record.clock_out == datetime(2024, 3, 15, 2, 0)
    assert record.total_hours == 4.0


def test_corrected_time_in_the_future_is_rejected(service, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    with pytest.raises(ValidationError):
        service.clock_out(employee_ctx, now=fixed_now.replace(hour=10), corrected_time=time(18, 0))


def test_assess_clock_out_flags_early_departure(service, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)

    assessment = service.assess_clock_out(employee_ctx, now=fixed_now.replace(hour=17))

    assert assessment.hours_worked == 8.0
    assert assessment.expected_hours == 9.0
    assert assessment.shift_end == datetime(2024, 3, 15, 18, 0)
    assert assessment.before_end_time
    assert assessment.insufficient_hours
    assert assessment.is_early
    assert not assessment.possible_missed_clock_out


def test_assess_clock_out_flags_possible_missed_clock_out(service, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)

    assessment = service.assess_clock_out(employee_ctx, now=fixed_now.replace(hour=22))

    assert not assessment.is_early
    assert assessment.possible_missed_clock_out


def test_history_rows_and_monthly_summary(service, attendance_repo, employee_ctx):
    for day, (start_h, start_m, end_h) in enumerate([(9, 0, 20), (9, 20, 18), (8, 55, 19)], start=1):
        clock_in = datetime(2024, 3, day, start_h, start_m)
        service.clock_in(employee_ctx, now=clock_in)
        service.clock_out(employee_ctx, now=datetime(2024, 3, day, end_h, 0))

    rows = service.history_rows(7, start=date(2024, 3, 1), end=date(2024, 3, 31))
    assert [r["date"] for r in rows] == ["2024-03-03", "2024-03-02", "2024-03-01"]
    assert rows[1]["late_minutes"] == 20
    assert rows[1]["late_label"] == "20 min"
    assert rows[2]["overtime_hours"] == 2.0

    summary = service.monthly_summary(7, year=2024, month=3)
    assert summary["total_days"] == 3
    assert summary["late_arrivals"] == 1
    assert summary["total_hours"] == 29.75
    assert summary["overtime_hours"] == 3.08
    assert summary["expected_hours_per_day"] == 9.0


def test_monthly_summary_rejects_invalid_month(service):
    with pytest.raises(ValidationError):
        service.monthly_summary(7, year=2024, month=13)


def test_clock_out_keeps_late_status(service, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now.replace(hour=9, minute=40))

    record = service.clock_out(employee_ctx, now=fixed_now.replace(hour=18))

    assert record.status == AttendanceStatus.LATE
    assert record.notes == "Late by 40 min"


def test_corrected_time_before_break_start_is_rejected(service, attendance_repo, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    break_id = service.pause(employee_ctx, now=fixed_now.replace(hour=17))

    with pytest.raises(ValidationError):
        service.clock_out(employee_ctx, now=fixed_now.replace(hour=20), corrected_time=time(16, 0))

    assert attendance_repo.breaks[break_id].is_open
    assert attendance_repo.records[1].clock_out is None


def test_corrected_time_after_break_start_closes_it(service, attendance_repo, employee_ctx, fixed_now):
    service.clock_in(employee_ctx, now=fixed_now)
    break_id = service.pause(employee_ctx, now=fixed_now.replace(hour=17))

    record = service.clock_out(employee_ctx, now=fixed_now.replace(hour=20), corrected_time=time(17, 30))

    assert record.total_hours == 8.0
    assert attendance_repo.breaks[break_id].resume_time == fixed_now.replace(hour=17, minute=30)


def test_clock_in_and_out_record_locations(service, attendance_repo, employee_ctx, fixed_now):
    office = GeoLocation(latitude=10.7769, longitude=106.7009, name="HQ")
    home = GeoLocation(latitude=10.8, longitude=106.65)

    service.clock_in(employee_ctx, now=fixed_now, location=office)
    record = service.clock_out(employee_ctx, now=fixed_now.replace(hour=18), location=home)

    assert record.clock_in_location == office
    assert record.clock_out_location == home
    assert attendance_repo.records[record.attendance_id].clock_in_location == office
    assert attendance_repo.records[record.attendance_id].clock_out_location == home


def test_zone_clock_works_with_naive_stored_record(attendance_repo, schedules_repo, employee_ctx):
    tz = ZoneInfo("UTC")
    service = AttendanceService(attendance_repo, schedules_repo, tz=tz)
    attendance_repo.add(_open_record(1, now_local(tz) - timedelta(hours=1)))

    assessment = service.assess_clock_out(employee_ctx)
    assert assessment.hours_worked == pytest.approx(1.0, abs=0.01)

    record = service.clock_out(employee_ctx)
    assert record.clock_out.tzinfo is None
    assert record.total_hours == pytest.approx(1.0, abs=0.01)


def test_aware_now_is_read_as_local_wall_clock(attendance_repo, schedules_repo, employee_ctx):
    service = AttendanceService(attendance_repo, schedules_repo, tz=timezone(timedelta(hours=7)))

    record = service.clock_in(employee_ctx, now=datetime(2024, 3, 15, 2, 0, tzinfo=timezone.utc))
    assert record.clock_in == datetime(2024, 3, 15, 9, 0)
    assert record.status == AttendanceStatus.PRESENT

    record = service.clock_out(employee_ctx, now=datetime(2024, 3, 15, 11, 0, tzinfo=timezone.utc))
    assert record.clock_out == datetime(2024, 3, 15, 18, 0)
    assert record.total_hours == 9.0


def test_reminders_follow_record_state(service, employee_ctx):
    (due,) = service.reminders(7, now=datetime(2024, 3, 15, 8, 45))
    assert due.kind == ReminderKind.CLOCK_IN

    service.clock_in(employee_ctx, now=datetime(2024, 3, 15, 8, 50))
    assert service.reminders(7, now=datetime(2024, 3, 15, 8, 52)) == []

    (due,) = service.reminders(7, now=datetime(2024, 3, 15, 18, 5))
    assert due.kind == ReminderKind.CLOCK_OUT

    service.clock_out(employee_ctx, now=datetime(2024, 3, 15, 18, 6))
    assert service.reminders(7, now=datetime(2024, 3, 15, 18, 8)) == []
