from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import AbsenceStatus, AbsenceType
from ..database.connection import DatabaseConnection, optional_int
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Absence, AbsenceFilter, AbsenceView
from .repository import AbsenceRepository

_COLUMNS = "a.absence_id, a.employee_id, a.absence_date, a.type, a.reason, a.status, a.processed_by, a.processed_at, a.created_at"


def _row_to_absence(r: dict) -> Absence:
    return Absence(
        absence_id=int(r["absence_id"]),
        employee_id=int(r["employee_id"]),
        absence_date=r["absence_date"],
        type=AbsenceType(r["type"]),
        reason=r["reason"],
        status=AbsenceStatus(r["status"]),
        processed_by=optional_int(r.get("processed_by")),
        processed_at=r.get("processed_at"),
        created_at=r.get("created_at"),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, absence: Absence) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absences(employee_id, absence_date, type, reason, status, processed_by, processed_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    absence.employee_id,
                    absence.absence_date,
                    absence.type.value,
                    absence.reason,
                    absence.status.value,
                    absence.processed_by,
                    absence.processed_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, absence_id: int) -> Optional[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM absences a WHERE a.absence_id=%s", (int(absence_id),))
            row = fetchone(cur)
            return _row_to_absence(row) if row else None

    def find_for_date(self, *, employee_id: int, absence_date: date, type: AbsenceType) -> Optional[Absence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM absences a
                WHERE a.employee_id=%s AND a.absence_date=%s AND a.type=%s
                ORDER BY a.absence_id DESC
                LIMIT 1
                """,
                (int(employee_id), absence_date, type.value),
            )
            row = fetchone(cur)
            return _row_to_absence(row) if row else None

    def save_status(self, absence: Absence) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absences
                SET status=%s, processed_by=%s, processed_at=%s, updated_at=CURRENT_TIMESTAMP
                WHERE absence_id=%s
                """,
                (absence.status.value, absence.processed_by, absence.processed_at, int(absence.absence_id)),
            )
            return cur.rowcount > 0

    def list(self, flt: AbsenceFilter) -> Sequence[AbsenceView]:
        clauses: list[str] = []
        params: list[Any] = []
        if flt.type:
            clauses.append("a.type=%s")
            params.append(flt.type.value)
        if flt.status:
            clauses.append("a.status=%s")
            params.append(flt.status.value)
        if flt.department:
            clauses.append("e.department=%s")
            params.append(flt.department)
        if flt.start_date:
            clauses.append("a.absence_date >= %s")
            params.append(flt.start_date)
        if flt.end_date:
            clauses.append("a.absence_date <= %s")
            params.append(flt.end_date)
        if flt.employee_id:
            clauses.append("a.employee_id=%s")
            params.append(int(flt.employee_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.full_name, e.department, p.full_name AS processor_name
                FROM absences a
                LEFT JOIN employees e ON e.employee_id = a.employee_id
                LEFT JOIN employees p ON p.employee_id = a.processed_by
                {where}
                ORDER BY a.absence_id ASC
                """,
                tuple(params),
            )
            return [
                AbsenceView(
                    absence=_row_to_absence(r),
                    full_name=r.get("full_name") or "",
                    department=r.get("department") or "",
                    processor_name=r.get("processor_name"),
                )
                for r in fetchall(cur)
            ]
