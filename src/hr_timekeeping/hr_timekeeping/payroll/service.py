from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import local_wall_clock, now_local
from ..common.validators import require_amount, require_month
from ..core.context import RequestContext
from ..core.enums import PayrollStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord, SalaryStructure
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

SALARY_COMPONENTS = (
    "hra",
    "transport_allowance",
    "medical_allowance",
    "other_allowances",
    "tax_deduction",
    "other_deductions",
)

ALLOWED_TRANSITIONS: dict[PayrollStatus, set[PayrollStatus]] = {
    PayrollStatus.DRAFT: {PayrollStatus.PROCESSED, PayrollStatus.PAID},
    PayrollStatus.PROCESSED: {PayrollStatus.DRAFT, PayrollStatus.PAID},
    PayrollStatus.PAID: set(),
}


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._payroll = payroll
        self._calculator = calculator or StandardPayrollCalculator()
        self._tz = tz

    def list_salary_structures(self) -> list[dict]:
        out: list[dict] = []
        for s in self._payroll.list_salary_structures():
            out.append(
                {
                    "employee_id": s.employee_id,
                    "employee_name": s.employee_name,
                    "basic_salary": s.basic_salary,
                    **{name: getattr(s, name) for name in SALARY_COMPONENTS},
                    "effective_from": s.effective_from.strftime("%Y-%m-%d") if s.effective_from else None,
                    "total_allowances": self._calculator.total_allowances(s),
                    "total_deductions": self._calculator.total_deductions(s),
                    "net_salary": self._calculator.net_salary(s),
                }
            )
        return out

    def save_salary_structure(
        self,
        ctx: RequestContext,
        *,
        employee_id: int,
        basic_salary: Any,
        effective_from: date,
        components: Mapping[str, Any] | None = None,
    ) -> SalaryStructure:
        ctx.require_admin_or_hr()

        components = components or {}
        unknown = set(components) - set(SALARY_COMPONENTS)
        if unknown:
            raise ValidationError(f"Unknown salary components: {', '.join(sorted(unknown))}")

        basic = require_amount(basic_salary, "Basic salary")
        if basic <= 0:
            raise ValidationError("Basic salary must be greater than zero")

        structure = SalaryStructure(
            employee_id=int(employee_id),
            basic_salary=basic,
            effective_from=effective_from,
            **{name: require_amount(components.get(name), name) for name in SALARY_COMPONENTS},
        )
        self._payroll.upsert_salary_structure(structure)
        return structure

    def generate(self, ctx: RequestContext, *, month: int, year: int) -> int:
        """Create draft payslips for every salary structure; returns the count."""
        ctx.require_admin_or_hr()
        month, year = require_month(month, year)

        if self._payroll.exists_for_period(month=month, year=year):
            raise ValidationError("Payroll already exists for this month")

        structures = self._payroll.list_salary_structures()
        if not structures:
            raise ValidationError(
                "No salary structures found. Please set up salary structures for employees first."
            )

        records = [self._calculator.build_payslip(s, month=month, year=year) for s in structures]
        count = self._payroll.insert_records(records)
        logger.info("Generated %d payslips for %02d/%d", count, month, year)
        return count

    def list_records(self, *, month: Optional[int] = None, year: Optional[int] = None) -> Sequence[PayrollRecord]:
        return self._payroll.list_records(month=month, year=year)

    def update_status(
        self,
        ctx: RequestContext,
        *,
        payroll_id: int,
        status: PayrollStatus,
        now: Optional[datetime] = None,
    ) -> None:
        self.bulk_update_status(ctx, payroll_ids=[payroll_id], status=status, now=now)

    def bulk_update_status(
        self,
        ctx: RequestContext,
        *,
        payroll_ids: Sequence[int],
        status: PayrollStatus,
        now: Optional[datetime] = None,
    ) -> int:
        """Move payslips to status; paid stamps paid_at, any other status clears it."""
        ctx.require_admin_or_hr()
        if not payroll_ids:
            raise ValidationError("No payroll records selected")

        for payroll_id in payroll_ids:
            record = self._payroll.get_record(int(payroll_id))
            if not record:
                raise NotFoundError(f"Payroll record {payroll_id} not found")
            if status != record.status and status not in ALLOWED_TRANSITIONS[record.status]:
                raise InvalidTransitionError(
                    f"Cannot move payroll {payroll_id} from {record.status.value} to {status.value}"
                )

        paid_at = None
        if status == PayrollStatus.PAID:
            paid_at = local_wall_clock(now, self._tz) if now else now_local(self._tz)
        return self._payroll.update_status(
            payroll_ids=[int(i) for i in payroll_ids],
            status=status,
            paid_at=paid_at,
        )

    def stats(self, *, month: int, year: int) -> dict:
        records = self._payroll.list_records(month=month, year=year)
        total = sum((r.net_salary for r in records), Decimal("0"))
        return {
            "total_payroll": total,
            "record_count": len(records),
            "avg_salary": (total / len(records)).quantize(Decimal("0.01")) if records else Decimal("0"),
            "pending": sum(1 for r in records if r.status == PayrollStatus.DRAFT),
        }
