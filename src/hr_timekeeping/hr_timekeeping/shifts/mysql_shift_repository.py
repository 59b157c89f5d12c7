from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import ShiftSchedule, resolve_schedule
from .repository import ShiftScheduleRepository


class MySQLShiftScheduleRepository(ShiftScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee(self, employee_id: int) -> Optional[ShiftSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT working_hours_start, working_hours_end, working_days
                FROM employees
                WHERE id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            start = normalize_mysql_time(r.get("working_hours_start"))
            end = normalize_mysql_time(r.get("working_hours_end"))
            working_days = r.get("working_days")
            if start is None and end is None and not working_days:
                return None
            return resolve_schedule(start, end, working_days)
