from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord, SalaryStructure


class PayrollRepository(Protocol):
    def list_salary_structures(self) -> Sequence[SalaryStructure]:
        raise NotImplementedError

    def upsert_salary_structure(self, structure: SalaryStructure) -> None:
        """Create or replace the structure of structure.employee_id."""

        raise NotImplementedError

    def exists_for_period(self, *, month: int, year: int) -> bool:
        raise NotImplementedError

    def insert_records(self, records: Sequence[PayrollRecord]) -> int:
        raise NotImplementedError

    def get_record(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_records(self, *, month: Optional[int] = None, year: Optional[int] = None) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def update_status(self, *, payroll_ids: Sequence[int], status: PayrollStatus, paid_at: Optional[datetime]) -> int:
        """Returns the number of updated records."""

        raise NotImplementedError
