from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import PayrollRecord, SalaryStructure


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def total_allowances(self, structure: SalaryStructure) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def total_deductions(self, structure: SalaryStructure) -> Decimal:
        raise NotImplementedError

    def net_salary(self, structure: SalaryStructure) -> Decimal:
        return structure.basic_salary + self.total_allowances(structure) - self.total_deductions(structure)

    @abstractmethod
    def build_payslip(self, structure: SalaryStructure, *, month: int, year: int) -> PayrollRecord:
        raise NotImplementedError
