from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest, LeaveType


class LeaveRepository(Protocol):
    def list_leave_types(self) -> Sequence[LeaveType]:
        raise NotImplementedError

    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def create_request(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        days_count: int,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def used_days_by_type(self, *, employee_id: int, year: int) -> dict[int, int]:
        """Approved days_count per leave type with start_date in year."""

        raise NotImplementedError

    def decide(self, *, request_id: int, status: LeaveStatus, reviewed_by: Optional[str]) -> bool:
        """Move a pending request to status; False when it is no longer pending."""

        raise NotImplementedError

    def status_counts(self) -> dict[LeaveStatus, int]:
        raise NotImplementedError
