from __future__ import annotations

from typing import Optional, Protocol

from .model import ShiftSchedule


class ShiftScheduleRepository(Protocol):
    def get_for_employee(self, employee_id: int) -> Optional[ShiftSchedule]:
        """Working hours configured on the employee, None when unset."""

        raise NotImplementedError
