from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import SalaryApprovalStatus
from ..database.connection import DatabaseConnection, optional_int
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SalaryApproval
from .repository import SalaryApprovalRepository

_COLUMNS = (
    "approval_id, employee_id, month, base_salary, deductions, bonus, final_salary, "
    "status, approved_by, approved_at, created_at"
)


def _row_to_approval(r: dict) -> SalaryApproval:
    return SalaryApproval(
        approval_id=int(r["approval_id"]),
        employee_id=int(r["employee_id"]),
        month=r["month"],
        base_salary=float(r["base_salary"]),
        deductions=float(r["deductions"]),
        bonus=float(r["bonus"]),
        final_salary=float(r["final_salary"]),
        status=SalaryApprovalStatus(r["status"]),
        approved_by=optional_int(r.get("approved_by")),
        approved_at=r.get("approved_at"),
        created_at=r.get("created_at"),
    )


class MySQLSalaryApprovalRepository(SalaryApprovalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        month: date,
        base_salary: float,
        deductions: float,
        bonus: float,
        final_salary: float,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_approvals(employee_id, month, base_salary, deductions, bonus, final_salary, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    month,
                    base_salary,
                    deductions,
                    bonus,
                    final_salary,
                    SalaryApprovalStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, approval_id: int) -> Optional[SalaryApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_approvals WHERE approval_id=%s", (int(approval_id),))
            r = fetchone(cur)
            return _row_to_approval(r) if r else None

    def find_for_month(self, *, employee_id: int, month: date) -> Sequence[SalaryApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_approvals
                WHERE employee_id=%s AND month=%s
                ORDER BY approval_id ASC
                """,
                (int(employee_id), month),
            )
            return [_row_to_approval(r) for r in fetchall(cur)]

    def save_decision(self, approval: SalaryApproval) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_approvals
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE approval_id=%s AND status=%s
                """,
                (
                    approval.status.value,
                    approval.approved_by,
                    approval.approved_at,
                    approval.approval_id,
                    SalaryApprovalStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_pending(self) -> Sequence[SalaryApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_approvals WHERE status=%s ORDER BY approval_id ASC",
                (SalaryApprovalStatus.PENDING.value,),
            )
            return [_row_to_approval(r) for r in fetchall(cur)]
