from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SalaryApprovalStatus


@dataclass(frozen=True)
class SalaryApproval:
    """Monthly salary computation waiting for (or past) root approval."""

    approval_id: int
    employee_id: int
    # First day of the month.
    month: date
    base_salary: float
    deductions: float
    bonus: float
    final_salary: float
    status: SalaryApprovalStatus = SalaryApprovalStatus.PENDING
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.approval_id,
            "user_id": self.employee_id,
            "month": self.month.strftime("%Y-%m"),
            "base_salary": self.base_salary,
            "deductions": self.deductions,
            "bonus": self.bonus,
            "final_salary": self.final_salary,
            "status": self.status.value,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
        }
