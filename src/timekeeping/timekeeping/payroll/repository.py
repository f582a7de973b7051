from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import SalaryApproval


class SalaryApprovalRepository(Protocol):
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
        raise NotImplementedError

    def get(self, approval_id: int) -> Optional[SalaryApproval]:
        raise NotImplementedError

    def find_for_month(self, *, employee_id: int, month: date) -> Sequence[SalaryApproval]:
        raise NotImplementedError

    def save_decision(self, approval: SalaryApproval) -> bool:
        """Persist status, approved_by and approved_at of a pending approval."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[SalaryApproval]:
        raise NotImplementedError
