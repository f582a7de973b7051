from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus, EmployeeStatus, ViolationType
from ..core.exceptions import DuplicateKeyError, DuplicateSessionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow, Violation
from .repository import AttendanceRepository, ViolationRepository

_COLUMNS = "attendance_id, employee_id, work_date, check_in_time, expected_time, check_out_time, status, note"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        expected_time=r["expected_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC, attendance_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND check_out_time IS NULL
                ORDER BY work_date DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        expected_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, check_in_time, expected_time, status, note)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, check_in_time, expected_time, status.value, note),
                )
                return int(cur.lastrowid)
        except DuplicateKeyError:
            raise DuplicateSessionError("You have already checked in today")

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, note=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, status.value, note, int(attendance_id)),
            )
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.check_in_time >= %s", "a.check_in_time <= %s"]
        params: list[Any] = [start, end]
        if employee_id:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))
        if department:
            clauses.append("e.department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.employee_id, e.full_name, e.nickname, e.department, e.status AS employee_status,
                       a.work_date, a.check_in_time, a.expected_time, a.check_out_time, a.status
                FROM attendance_records a
                JOIN employees e ON e.employee_id = a.employee_id
                WHERE {' AND '.join(clauses)}
                ORDER BY a.attendance_id ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    employee_id=int(r["employee_id"]),
                    full_name=r.get("full_name") or "",
                    nickname=r["nickname"],
                    department=r.get("department") or "",
                    employee_status=EmployeeStatus(r["employee_status"]),
                    work_date=r["work_date"],
                    check_in_time=r["check_in_time"],
                    expected_time=r["expected_time"],
                    check_out_time=r.get("check_out_time"),
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]

    def get_late_sessions(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE check_in_time > expected_time
                ORDER BY attendance_id ASC
                """
            )
            return [_row_to_record(r) for r in fetchall(cur)]


class MySQLViolationRepository(ViolationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_violation(r: dict) -> Violation:
        return Violation(
            violation_id=int(r["violation_id"]),
            employee_id=int(r["employee_id"]),
            violation_date=r["violation_date"],
            type=ViolationType(r["type"]),
            deduction_amount=float(r["deduction_amount"]),
            details=r.get("details") or "",
            created_at=r.get("created_at"),
        )

    def get(self, *, employee_id: int, violation_date: date, type: ViolationType) -> Optional[Violation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT violation_id, employee_id, violation_date, type, deduction_amount, details, created_at
                FROM violations
                WHERE employee_id=%s AND violation_date=%s AND type=%s
                """,
                (int(employee_id), violation_date, type.value),
            )
            r = fetchone(cur)
            return self._to_violation(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        violation_date: date,
        type: ViolationType,
        deduction_amount: float,
        details: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO violations(employee_id, violation_date, type, deduction_amount, details)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), violation_date, type.value, deduction_amount, details),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Violation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT violation_id, employee_id, violation_date, type, deduction_amount, details, created_at
                FROM violations
                WHERE employee_id=%s AND violation_date BETWEEN %s AND %s
                ORDER BY violation_id ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [self._to_violation(r) for r in fetchall(cur)]
