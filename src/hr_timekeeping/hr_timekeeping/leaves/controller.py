from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import arg_int, context_required, json_body, ok
from ..container import Container
from ..core.context import RequestContext
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_submit")
    @context_required
    def leave_submit(ctx: RequestContext):
        body = json_body()
        try:
            leave_type_id = int(body.get("leave_type_id"))
            start_date = parse_iso_date(body.get("start_date") or "")
            end_date = parse_iso_date(body.get("end_date") or "")
        except (TypeError, ValueError):
            raise ValidationError("leave_type_id, start_date and end_date (YYYY-MM-DD) are required")

        request_id = service.submit(
            ctx,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            reason=body.get("reason"),
        )
        return ok({"request_id": request_id}, message="Leave request submitted", status=201)

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="leave_mine")
    @context_required
    def leave_mine(ctx: RequestContext):
        return ok(service.list_my_requests(ctx))

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="leave_pending")
    @context_required
    def leave_pending(ctx: RequestContext):
        return ok(service.list_pending(ctx))

    @app.route("/api/leaves/balances", methods=["GET"], endpoint="leave_balances")
    @context_required
    def leave_balances(ctx: RequestContext):
        year = arg_int("year", now_local(container.tz).year)
        balances = service.balances(ctx.require_employee(), year=year)
        return ok(
            [
                {
                    "leave_type": b.leave_type,
                    "year": b.year,
                    "total_days": b.total_days,
                    "used_days": b.used_days,
                    "remaining_days": b.remaining_days,
                }
                for b in balances
            ]
        )

    @app.route("/api/leaves/stats", methods=["GET"], endpoint="leave_stats")
    @context_required
    def leave_stats(ctx: RequestContext):
        ctx.require_admin_or_hr()
        return ok(service.stats())

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    @context_required
    def leave_approve(ctx: RequestContext, request_id: int):
        service.approve(ctx, request_id=request_id)
        return ok(message="Leave request approved")

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    @context_required
    def leave_reject(ctx: RequestContext, request_id: int):
        service.reject(ctx, request_id=request_id)
        return ok(message="Leave request rejected")

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    @context_required
    def leave_cancel(ctx: RequestContext, request_id: int):
        service.cancel(ctx, request_id=request_id)
        return ok(message="Leave request cancelled")
