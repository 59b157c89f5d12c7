from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.validators import optional_text
from ..core.context import RequestContext
from ..core.enums import LeaveStatus
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def leave_days(start_date: date, end_date: date) -> int:
    """Inclusive day count of a leave period."""
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")
    return (end_date - start_date).days + 1


class LeaveService:
    """Leave requests and the balances derived from approved ones."""

    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def balances(self, employee_id: int, *, year: int) -> list[LeaveBalance]:
        used = self._leaves.used_days_by_type(employee_id=int(employee_id), year=int(year))
        return [
            LeaveBalance(
                leave_type=lt,
                year=int(year),
                total_days=lt.days_per_year,
                used_days=used.get(lt.leave_type_id, 0),
            )
            for lt in self._leaves.list_leave_types()
        ]

    def _remaining(self, *, employee_id: int, leave_type_id: int, year: int) -> int:
        for balance in self.balances(employee_id, year=year):
            if balance.leave_type.leave_type_id == leave_type_id:
                return balance.remaining_days
        raise NotFoundError("Leave type not found")

    def submit(
        self,
        ctx: RequestContext,
        *,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> int:
        employee_id = ctx.require_employee()
        days_count = leave_days(start_date, end_date)

        if not self._leaves.get_leave_type(int(leave_type_id)):
            raise NotFoundError("Leave type not found")

        remaining = self._remaining(employee_id=employee_id, leave_type_id=int(leave_type_id), year=start_date.year)
        if days_count > remaining:
            raise ValidationError(f"Insufficient leave balance: {remaining} day(s) remaining")

        request_id = self._leaves.create_request(
            employee_id=employee_id,
            leave_type_id=int(leave_type_id),
            start_date=start_date,
            end_date=end_date,
            days_count=days_count,
            reason=optional_text(reason),
        )
        logger.info("Employee %s requested %d day(s) of leave (request %s)", employee_id, days_count, request_id)
        return request_id

    def _get_pending(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_request(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError(f"Leave request is already {req.status.value}")
        return req

    def _decide(self, ctx: RequestContext, req: LeaveRequest, status: LeaveStatus) -> None:
        if not self._leaves.decide(request_id=req.request_id, status=status, reviewed_by=ctx.user_id):
            raise InvalidTransitionError("Leave request was already processed")
        logger.info("Leave request %s %s by %s", req.request_id, status.value, ctx.user_id)

    def approve(self, ctx: RequestContext, *, request_id: int) -> None:
        ctx.require_admin_or_hr()
        req = self._get_pending(request_id)

        remaining = self._remaining(
            employee_id=req.employee_id,
            leave_type_id=req.leave_type_id,
            year=req.start_date.year,
        )
        if req.days_count > remaining:
            raise ValidationError(f"Insufficient leave balance: {remaining} day(s) remaining")

        self._decide(ctx, req, LeaveStatus.APPROVED)

    def reject(self, ctx: RequestContext, *, request_id: int) -> None:
        ctx.require_admin_or_hr()
        self._decide(ctx, self._get_pending(request_id), LeaveStatus.REJECTED)

    def cancel(self, ctx: RequestContext, *, request_id: int) -> None:
        req = self._get_pending(request_id)
        if req.employee_id != ctx.employee_id:
            raise AuthorizationError("Only the requester can cancel a leave request")
        self._decide(ctx, req, LeaveStatus.CANCELLED)

    def list_my_requests(self, ctx: RequestContext) -> list[LeaveRequest]:
        return list(self._leaves.list_requests(employee_id=ctx.require_employee()))

    def list_pending(self, ctx: RequestContext) -> list[LeaveRequest]:
        ctx.require_admin_or_hr()
        return list(self._leaves.list_requests(status=LeaveStatus.PENDING, limit=500))

    def stats(self) -> dict:
        counts = self._leaves.status_counts()
        return {
            "pending": counts.get(LeaveStatus.PENDING, 0),
            "approved": counts.get(LeaveStatus.APPROVED, 0),
            "rejected": counts.get(LeaveStatus.REJECTED, 0),
        }
