from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local, parse_time_of_day
from ..common.http import arg_date, arg_int, context_required, json_body, ok
from ..container import Container
from ..core.context import RequestContext
from ..core.enums import WorkMode
from ..core.exceptions import ValidationError
from .model import GeoLocation
from .state import attendance_state


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _work_mode(value):
        if not value:
            return None
        try:
            return WorkMode(value)
        except ValueError:
            raise ValidationError("work_mode must be 'wfh' or 'wfo'")

    def _location(value):
        if not value:
            return None
        try:
            latitude = float(value["latitude"])
            longitude = float(value["longitude"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("location needs numeric latitude and longitude")
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValidationError("location is out of range")
        return GeoLocation(latitude=latitude, longitude=longitude, name=value.get("name") or None)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @context_required
    def attendance_today(ctx: RequestContext):
        today = now_local(container.tz).date()
        record = service.get_today_record(ctx.require_employee(), today)
        return ok({"record": record, "state": attendance_state(record)})

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @context_required
    def attendance_clock_in(ctx: RequestContext):
        body = json_body()
        record = service.clock_in(
            ctx,
            work_mode=_work_mode(body.get("work_mode")),
            location=_location(body.get("location")),
        )
        return ok(record, message="Clocked in", status=201)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @context_required
    def attendance_clock_out(ctx: RequestContext):
        body = json_body()
        corrected = body.get("corrected_time")
        try:
            corrected_time = parse_time_of_day(corrected) if corrected else None
        except ValueError:
            raise ValidationError("corrected_time must be HH:MM")

        record = service.clock_out(ctx, corrected_time=corrected_time, location=_location(body.get("location")))
        return ok(record, message="Clocked out")

    @app.route("/api/attendance/clock-out/assessment", methods=["GET"], endpoint="attendance_clock_out_assessment")
    @context_required
    def attendance_clock_out_assessment(ctx: RequestContext):
        assessment = service.assess_clock_out(ctx)
        data = dict(vars(assessment), is_early=assessment.is_early)
        return ok(data)

    @app.route("/api/attendance/reminders", methods=["GET"], endpoint="attendance_reminders")
    @context_required
    def attendance_reminders(ctx: RequestContext):
        return ok(service.reminders(ctx.require_employee()))

    @app.route("/api/attendance/pause", methods=["POST"], endpoint="attendance_pause")
    @context_required
    def attendance_pause(ctx: RequestContext):
        break_id = service.pause(ctx)
        return ok({"break_id": break_id}, message="Break started", status=201)

    @app.route("/api/attendance/resume", methods=["POST"], endpoint="attendance_resume")
    @context_required
    def attendance_resume(ctx: RequestContext):
        service.resume(ctx)
        return ok(message="Break ended")

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @context_required
    def attendance_history(ctx: RequestContext):
        today = now_local(container.tz).date()
        start = arg_date("start", today.replace(day=1))
        end = arg_date("end", today)
        if end < start:
            raise ValidationError("end must be on or after start")

        rows = service.history_rows(ctx.require_employee(), start=start, end=end)
        return ok({"start": start, "end": end, "rows": rows})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @context_required
    def attendance_summary(ctx: RequestContext):
        today = now_local(container.tz).date()
        year = arg_int("year", today.year)
        month = arg_int("month", today.month)
        return ok(service.monthly_summary(ctx.require_employee(), year=year, month=month))
