from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.enums import PayrollStatus
from ..model import PayrollRecord, SalaryStructure
from .base import PayrollCalculator

CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return Decimal(value or 0).quantize(CENTS, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: basic + allowances - deductions."""

    def total_allowances(self, structure: SalaryStructure) -> Decimal:
        return _money(
            (structure.hra or 0)
            + (structure.transport_allowance or 0)
            + (structure.medical_allowance or 0)
            + (structure.other_allowances or 0)
        )

    def total_deductions(self, structure: SalaryStructure) -> Decimal:
        return _money((structure.tax_deduction or 0) + (structure.other_deductions or 0))

    def build_payslip(self, structure: SalaryStructure, *, month: int, year: int) -> PayrollRecord:
        return PayrollRecord(
            payroll_id=None,
            employee_id=structure.employee_id,
            month=month,
            year=year,
            basic_salary=_money(structure.basic_salary),
            total_allowances=self.total_allowances(structure),
            total_deductions=self.total_deductions(structure),
            net_salary=_money(self.net_salary(structure)),
            status=PayrollStatus.DRAFT,
            employee_name=structure.employee_name,
        )
