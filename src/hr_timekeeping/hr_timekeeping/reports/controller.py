from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.http import arg_int, context_required, ok
from ..container import Container
from ..core.context import RequestContext


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["GET"], endpoint="attendance_report")
    @context_required
    def attendance_report(ctx: RequestContext):
        today = now_local(container.tz).date()
        report = container.attendance_report_service.build_monthly_report(
            ctx,
            year=arg_int("year", today.year),
            month=arg_int("month", today.month),
        )
        return ok(report)
