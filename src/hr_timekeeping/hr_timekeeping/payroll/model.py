from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class SalaryStructure:
    """Monthly salary components of an employee."""

    employee_id: int
    basic_salary: Decimal
    hra: Decimal = Decimal("0")
    transport_allowance: Decimal = Decimal("0")
    medical_allowance: Decimal = Decimal("0")
    other_allowances: Decimal = Decimal("0")
    tax_deduction: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")
    effective_from: Optional[date] = None
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class PayrollRecord:
    """Payslip of one employee for one month."""

    payroll_id: Optional[int]
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    status: PayrollStatus = PayrollStatus.DRAFT
    paid_at: Optional[datetime] = None
    employee_name: Optional[str] = None
