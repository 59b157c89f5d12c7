from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus, WorkMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, to_float
from .model import AttendanceBreak, AttendanceRecord, AttendanceReportRow, GeoLocation
from .repository import AttendanceRepository

_RECORD_COLUMNS = (
    "id, employee_id, date, clock_in, clock_out, total_hours, status, notes, work_mode, "
    "clock_in_latitude, clock_in_longitude, clock_in_location_name, "
    "clock_out_latitude, clock_out_longitude, clock_out_location_name"
)


def _to_location(r: Dict[str, Any], prefix: str) -> Optional[GeoLocation]:
    latitude = r.get(f"{prefix}_latitude")
    longitude = r.get(f"{prefix}_longitude")
    if latitude is None or longitude is None:
        return None
    return GeoLocation(
        latitude=float(latitude),
        longitude=float(longitude),
        name=r.get(f"{prefix}_location_name"),
    )


def _location_params(location: Optional[GeoLocation]) -> tuple:
    if location is None:
        return (None, None, None)
    return (location.latitude, location.longitude, location.name)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["date"],
        clock_in=r["clock_in"],
        clock_out=r.get("clock_out"),
        total_hours=to_float(r.get("total_hours")),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        work_mode=WorkMode(r["work_mode"]) if r.get("work_mode") else None,
        clock_in_location=_to_location(r, "clock_in"),
        clock_out_location=_to_location(r, "clock_out"),
    )


def _to_break(r: Dict[str, Any]) -> AttendanceBreak:
    return AttendanceBreak(
        break_id=int(r["id"]),
        attendance_id=int(r["attendance_record_id"]),
        pause_time=r["pause_time"],
        resume_time=r.get("resume_time"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date=%s AND clock_out IS NULL
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date DESC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
        work_mode: Optional[WorkMode] = None,
        location: Optional[GeoLocation] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, date, clock_in, status, notes, work_mode,
                    clock_in_latitude, clock_in_longitude, clock_in_location_name
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    work_date,
                    clock_in,
                    status.value,
                    notes,
                    work_mode.value if work_mode else None,
                    *_location_params(location),
                ),
            )
            return int(cur.lastrowid)

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        total_hours: float,
        location: Optional[GeoLocation] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, total_hours=%s,
                    clock_out_latitude=%s, clock_out_longitude=%s, clock_out_location_name=%s
                WHERE id=%s AND clock_out IS NULL
                """,
                (clock_out, total_hours, *_location_params(location), int(attendance_id)),
            )
            return cur.rowcount > 0

    def get_open_break(self, attendance_id: int) -> Optional[AttendanceBreak]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, attendance_record_id, pause_time, resume_time
                FROM attendance_breaks
                WHERE attendance_record_id=%s AND resume_time IS NULL
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_break(r) if r else None

    def list_breaks(self, attendance_id: int) -> Sequence[AttendanceBreak]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, attendance_record_id, pause_time, resume_time
                FROM attendance_breaks
                WHERE attendance_record_id=%s
                ORDER BY pause_time ASC
                """,
                (int(attendance_id),),
            )
            return [_to_break(r) for r in fetchall(cur)]

    def create_break(self, *, attendance_id: int, pause_time: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance_breaks(attendance_record_id, pause_time) VALUES(%s,%s)",
                (int(attendance_id), pause_time),
            )
            return int(cur.lastrowid)

    def close_break(self, *, break_id: int, resume_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_breaks SET resume_time=%s WHERE id=%s AND resume_time IS NULL",
                (resume_time, int(break_id)),
            )
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    e.id AS employee_id, e.first_name, e.last_name, e.employee_code,
                    e.working_hours_start, e.working_hours_end,
                    d.name AS department_name,
                    ar.date, ar.clock_in, ar.clock_out, ar.total_hours, ar.status
                FROM attendance_records ar
                JOIN employees e ON e.id = ar.employee_id
                LEFT JOIN departments d ON d.id = e.department_id
                WHERE {where}
                ORDER BY ar.date DESC, e.id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    employee_id=int(r["employee_id"]),
                    employee_name=f"{r['first_name']} {r['last_name']}",
                    employee_code=r["employee_code"],
                    department_name=r.get("department_name"),
                    working_hours_start=normalize_mysql_time(r.get("working_hours_start")),
                    working_hours_end=normalize_mysql_time(r.get("working_hours_end")),
                    work_date=r["date"],
                    clock_in=r.get("clock_in"),
                    clock_out=r.get("clock_out"),
                    total_hours=to_float(r.get("total_hours")),
                    status=AttendanceStatus(r["status"]),
                )
                for r in rows
            ]
