from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import arg_int, context_required, json_body, ok
from ..container import Container
from ..core.context import RequestContext
from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError
from .service import SALARY_COMPONENTS


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    def _status(value) -> PayrollStatus:
        try:
            return PayrollStatus(value)
        except ValueError:
            raise ValidationError("status must be one of draft, processed, paid")

    def _period(body: dict) -> tuple[int, int]:
        today = now_local(container.tz).date()
        try:
            return int(body.get("month") or today.month), int(body.get("year") or today.year)
        except (TypeError, ValueError):
            raise ValidationError("month and year must be numbers")

    @app.route("/api/payroll/salary-structures", methods=["GET"], endpoint="salary_structures")
    @context_required
    def salary_structures(ctx: RequestContext):
        ctx.require_admin_or_hr()
        return ok(service.list_salary_structures())

    @app.route(
        "/api/payroll/salary-structures/<int:employee_id>",
        methods=["PUT"],
        endpoint="salary_structure_save",
    )
    @context_required
    def salary_structure_save(ctx: RequestContext, employee_id: int):
        body = json_body()
        try:
            effective_from = (
                parse_iso_date(body["effective_from"])
                if body.get("effective_from")
                else now_local(container.tz).date()
            )
        except ValueError:
            raise ValidationError("effective_from must be YYYY-MM-DD")

        structure = service.save_salary_structure(
            ctx,
            employee_id=employee_id,
            basic_salary=body.get("basic_salary"),
            effective_from=effective_from,
            components={k: body[k] for k in SALARY_COMPONENTS if k in body},
        )
        return ok(structure, message="Salary structure saved")

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @context_required
    def payroll_generate(ctx: RequestContext):
        month, year = _period(json_body())
        count = service.generate(ctx, month=month, year=year)
        return ok({"count": count}, message=f"Generated payroll for {count} employees", status=201)

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @context_required
    def payroll_list(ctx: RequestContext):
        ctx.require_admin_or_hr()
        return ok(list(service.list_records(month=arg_int("month"), year=arg_int("year"))))

    @app.route("/api/payroll/stats", methods=["GET"], endpoint="payroll_stats")
    @context_required
    def payroll_stats(ctx: RequestContext):
        ctx.require_admin_or_hr()
        today = now_local(container.tz).date()
        return ok(service.stats(month=arg_int("month", today.month), year=arg_int("year", today.year)))

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["POST"], endpoint="payroll_status")
    @context_required
    def payroll_status(ctx: RequestContext, payroll_id: int):
        service.update_status(ctx, payroll_id=payroll_id, status=_status(json_body().get("status")))
        return ok(message="Payroll status updated")

    @app.route("/api/payroll/status", methods=["POST"], endpoint="payroll_bulk_status")
    @context_required
    def payroll_bulk_status(ctx: RequestContext):
        body = json_body()
        ids = body.get("payroll_ids") or []
        if not isinstance(ids, list):
            raise ValidationError("payroll_ids must be a list")

        count = service.bulk_update_status(ctx, payroll_ids=ids, status=_status(body.get("status")))
        return ok({"count": count}, message=f"{count} payroll record(s) updated")
