from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import DuplicateKeyError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, EmployeeFilter
from .repository import EmployeeRepository

_SELECT = """
    SELECT employee_id, nickname, role, status, full_name, email, phone_number, address,
           date_of_birth, gender, tax_id, health_insurance_id, social_insurance_id,
           number_of_dependents, position, location, department, wallet_address,
           salary, leave_balance, onboard_date, password_hash, created_at, updated_at
    FROM employees e
"""

# Columns an update may write; anything else never reaches SQL.
_UPDATABLE_COLUMNS = frozenset(
    {
        "full_name",
        "email",
        "phone_number",
        "address",
        "date_of_birth",
        "gender",
        "tax_id",
        "health_insurance_id",
        "social_insurance_id",
        "number_of_dependents",
        "position",
        "location",
        "department",
        "wallet_address",
        "salary",
        "status",
        "leave_balance",
        "password_hash",
    }
)


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        nickname=r["nickname"],
        role=Role(r["role"]),
        status=EmployeeStatus(r["status"]),
        full_name=r.get("full_name") or "",
        email=r.get("email"),
        phone_number=r.get("phone_number") or "",
        address=r.get("address") or "",
        date_of_birth=r.get("date_of_birth"),
        gender=r.get("gender") or "",
        tax_id=r.get("tax_id") or "",
        health_insurance_id=r.get("health_insurance_id") or "",
        social_insurance_id=r.get("social_insurance_id") or "",
        number_of_dependents=int(r.get("number_of_dependents") or 0),
        position=r.get("position") or "",
        location=r.get("location") or "",
        department=r.get("department") or "",
        wallet_address=r.get("wallet_address") or "",
        salary=float(r.get("salary") or 0),
        leave_balance=int(r.get("leave_balance") or 0),
        onboard_date=r.get("onboard_date"),
        password_hash=r.get("password_hash"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("e.employee_id=%s", (int(employee_id),))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("e.email=%s", (email,))

    def get_by_nickname(self, nickname: str) -> Optional[Employee]:
        return self._get_one("e.nickname=%s", (nickname,))

    def create(
        self,
        *,
        nickname: str,
        role: Role,
        status: EmployeeStatus,
        onboard_date: date,
        salary: float = 0.0,
        wallet_address: str = "",
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(nickname, role, status, onboard_date, salary, wallet_address)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (nickname, role.value, status.value, onboard_date, salary, wallet_address),
                )
                return int(cur.lastrowid)
        except DuplicateKeyError:
            raise ValidationError("Nickname already exists")

    def update_fields(self, employee_id: int, values: dict[str, Any]) -> bool:
        columns = [c for c in values if c in _UPDATABLE_COLUMNS]
        if not columns:
            return False

        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [values[c].value if isinstance(values[c], Enum) else values[c] for c in columns]
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE employees SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE employee_id=%s",
                    (*params, int(employee_id)),
                )
                return cur.rowcount > 0
        except DuplicateKeyError:
            raise ValidationError("Email already exists")

    def list(self, flt: EmployeeFilter) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[Any] = []
        if flt.department:
            clauses.append("e.department=%s")
            params.append(flt.department)
        if flt.status:
            clauses.append("e.status=%s")
            params.append(flt.status.value)
        if flt.role:
            clauses.append("e.role=%s")
            params.append(flt.role.value)
        if flt.onboard_from:
            clauses.append("e.onboard_date >= %s")
            params.append(flt.onboard_from)
        if flt.onboard_to:
            clauses.append("e.onboard_date <= %s")
            params.append(flt.onboard_to)
        if flt.absence_type:
            clauses.append("EXISTS (SELECT 1 FROM absences a WHERE a.employee_id=e.employee_id AND a.type=%s)")
            params.append(flt.absence_type)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY e.employee_id ASC", tuple(params))
            return [_row_to_employee(r) for r in fetchall(cur)]

    def count_by_status(self, status: EmployeeStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE status=%s", (status.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
