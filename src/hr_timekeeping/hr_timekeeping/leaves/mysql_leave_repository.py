from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, LeaveType
from .repository import LeaveRepository

_REQUEST_COLUMNS = (
    "id, employee_id, leave_type_id, start_date, end_date, days_count, status, "
    "created_at, reason, reviewed_by, reviewed_at"
)


def _to_type(r: Dict[str, Any]) -> LeaveType:
    return LeaveType(
        leave_type_id=int(r["id"]),
        name=r["name"],
        days_per_year=int(r.get("days_per_year") or 0),
        is_paid=bool(r.get("is_paid", True)),
    )


def _to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days_count=int(r["days_count"]),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        reason=r.get("reason"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_leave_types(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, days_per_year, is_paid FROM leave_types ORDER BY name")
            return [_to_type(r) for r in fetchall(cur)]

    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, days_per_year, is_paid FROM leave_types WHERE id=%s", (int(leave_type_id),))
            r = fetchone(cur)
            return _to_type(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type_id, start_date, end_date, days_count, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(leave_type_id),
                    start_date,
                    end_date,
                    int(days_count),
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM leave_requests
                {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def used_days_by_type(self, *, employee_id: int, year: int) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type_id, COALESCE(SUM(days_count), 0) AS used_days
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date BETWEEN %s AND %s
                GROUP BY leave_type_id
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, date(year, 1, 1), date(year, 12, 31)),
            )
            return {int(r["leave_type_id"]): int(r["used_days"]) for r in fetchall(cur)}

    def decide(self, *, request_id: int, status: LeaveStatus, reviewed_by: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW()
                WHERE id=%s AND status=%s
                """,
                (status.value, reviewed_by, int(request_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def status_counts(self) -> dict[LeaveStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS total FROM leave_requests GROUP BY status")
            return {LeaveStatus(r["status"]): int(r["total"]) for r in fetchall(cur)}
