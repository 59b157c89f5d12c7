from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_decimal
from .model import PayrollRecord, SalaryStructure
from .repository import PayrollRepository

_RECORD_SELECT = """
    SELECT
        p.id, p.employee_id, p.month, p.year,
        p.basic_salary, p.total_allowances, p.total_deductions, p.net_salary,
        p.status, p.paid_at,
        CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM payroll_records p
    LEFT JOIN employees e ON e.id = p.employee_id
"""


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        basic_salary=to_decimal(r["basic_salary"]),
        total_allowances=to_decimal(r["total_allowances"]),
        total_deductions=to_decimal(r["total_deductions"]),
        net_salary=to_decimal(r["net_salary"]),
        status=PayrollStatus(r["status"]),
        paid_at=r.get("paid_at"),
        employee_name=r.get("employee_name"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_salary_structures(self) -> Sequence[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.employee_id, s.basic_salary, s.hra, s.transport_allowance,
                    s.medical_allowance, s.other_allowances, s.tax_deduction,
                    s.other_deductions, s.effective_from,
                    CONCAT(e.first_name, ' ', e.last_name) AS employee_name
                FROM salary_structures s
                LEFT JOIN employees e ON e.id = s.employee_id
                ORDER BY s.employee_id
                """
            )
            return [
                SalaryStructure(
                    employee_id=int(r["employee_id"]),
                    basic_salary=to_decimal(r["basic_salary"]),
                    hra=to_decimal(r.get("hra")),
                    transport_allowance=to_decimal(r.get("transport_allowance")),
                    medical_allowance=to_decimal(r.get("medical_allowance")),
                    other_allowances=to_decimal(r.get("other_allowances")),
                    tax_deduction=to_decimal(r.get("tax_deduction")),
                    other_deductions=to_decimal(r.get("other_deductions")),
                    effective_from=r.get("effective_from"),
                    employee_name=r.get("employee_name"),
                )
                for r in fetchall(cur)
            ]

    def upsert_salary_structure(self, structure: SalaryStructure) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_structures(
                    employee_id, basic_salary, hra, transport_allowance, medical_allowance,
                    other_allowances, tax_deduction, other_deductions, effective_from
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    basic_salary=VALUES(basic_salary), hra=VALUES(hra),
                    transport_allowance=VALUES(transport_allowance),
                    medical_allowance=VALUES(medical_allowance),
                    other_allowances=VALUES(other_allowances),
                    tax_deduction=VALUES(tax_deduction),
                    other_deductions=VALUES(other_deductions),
                    effective_from=VALUES(effective_from)
                """,
                (
                    int(structure.employee_id),
                    structure.basic_salary,
                    structure.hra,
                    structure.transport_allowance,
                    structure.medical_allowance,
                    structure.other_allowances,
                    structure.tax_deduction,
                    structure.other_deductions,
                    structure.effective_from,
                ),
            )

    def exists_for_period(self, *, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM payroll_records WHERE month=%s AND year=%s LIMIT 1", (int(month), int(year)))
            return fetchone(cur) is not None

    def insert_records(self, records: Sequence[PayrollRecord]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO payroll_records(
                    employee_id, month, year, basic_salary, total_allowances,
                    total_deductions, net_salary, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        r.employee_id,
                        r.month,
                        r.year,
                        r.basic_salary,
                        r.total_allowances,
                        r.total_deductions,
                        r.net_salary,
                        r.status.value,
                    )
                    for r in records
                ],
            )
            return len(records)

    def get_record(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_RECORD_SELECT + " WHERE p.id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_records(self, *, month: Optional[int] = None, year: Optional[int] = None) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if month is not None:
            clauses.append("p.month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("p.year=%s")
            params.append(int(year))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_RECORD_SELECT + where + " ORDER BY p.created_at DESC", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def update_status(self, *, payroll_ids: Sequence[int], status: PayrollStatus, paid_at: Optional[datetime]) -> int:
        if not payroll_ids:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll_records SET status=%s, paid_at=%s WHERE id IN ({in_clause(payroll_ids)})",
                (status.value, paid_at, *[int(i) for i in payroll_ids]),
            )
            return int(cur.rowcount)
