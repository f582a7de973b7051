from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.repository import ViolationRepository
from ..common.datetime_utils import month_bounds, now_local, parse_month
from ..core.enums import Role, SalaryApprovalStatus
from ..core.exceptions import NotFound, ValidationError
from ..core.transaction import NullTransactionManager, TransactionManager
from ..employees.access import Action, require
from ..employees.repository import EmployeeRepository
from ..ledger.service import LedgerNotifier
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import SalaryApproval
from .repository import SalaryApprovalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryDecision:
    approval: SalaryApproval
    ledger_synced: bool = True


class PayrollService:
    """Monthly salary processing and the root approval step."""

    def __init__(
        self,
        approvals: SalaryApprovalRepository,
        employees: EmployeeRepository,
        violations: ViolationRepository,
        ledger: LedgerNotifier,
        *,
        calculator: Optional[SalaryCalculator] = None,
        tx: Optional[TransactionManager] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._approvals = approvals
        self._employees = employees
        self._violations = violations
        self._ledger = ledger
        self._calculator = calculator or StandardSalaryCalculator()
        self._tx = tx or NullTransactionManager()
        self._clock = clock

    def process_monthly_salary(
        self,
        *,
        actor_role: Role,
        employee_id: int,
        month: date | str,
        bonus: float = 0.0,
    ) -> SalaryApproval:
        require(actor_role, Action.PROCESS_SALARY, "Only root or accountant can process salaries")

        first_day = parse_month(month)
        try:
            bonus = float(bonus or 0)
        except (TypeError, ValueError):
            raise ValidationError("bonus must be a number")
        if not math.isfinite(bonus):
            raise ValidationError("bonus must be a finite number")
        if bonus < 0:
            raise ValidationError("bonus cannot be negative")

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFound("Employee not found")
        if employee.salary <= 0:
            raise ValidationError("Employee has no base salary")

        for existing in self._approvals.find_for_month(employee_id=employee.employee_id, month=first_day):
            if existing.status != SalaryApprovalStatus.REJECTED:
                raise ValidationError("Salary for this month has already been processed")

        start, end = month_bounds(first_day)
        violations = self._violations.list_for_employee(employee_id=employee.employee_id, start_date=start, end_date=end)
        deductions = self._calculator.deductions(employee.salary, violations)
        final_salary = self._calculator.final_salary(employee.salary, deductions, bonus)

        approval_id = self._approvals.create(
            employee_id=employee.employee_id,
            month=first_day,
            base_salary=employee.salary,
            deductions=deductions,
            bonus=bonus,
            final_salary=final_salary,
        )
        logger.info(
            "Salary %s for employee #%s: base=%s deductions=%s bonus=%s (%s violations)",
            first_day.strftime("%Y-%m"),
            employee.employee_id,
            employee.salary,
            deductions,
            bonus,
            len(violations),
        )
        return self._get(approval_id)

    def approve_salary(self, *, actor_id: int, actor_role: Role, approval_id: int) -> SalaryDecision:
        decided = self._decide(
            actor_id=actor_id, actor_role=actor_role, approval_id=approval_id, status=SalaryApprovalStatus.APPROVED
        )

        employee = self._employees.get_by_id(decided.employee_id)
        synced = True
        if employee and employee.wallet_address:
            synced = self._ledger.pay_salary(
                employee=employee.wallet_address,
                amount=decided.final_salary,
                deductions=decided.deductions,
                bonus=decided.bonus,
            )
        return SalaryDecision(approval=decided, ledger_synced=synced)

    def reject_salary(self, *, actor_id: int, actor_role: Role, approval_id: int) -> SalaryDecision:
        decided = self._decide(
            actor_id=actor_id, actor_role=actor_role, approval_id=approval_id, status=SalaryApprovalStatus.REJECTED
        )
        return SalaryDecision(approval=decided)

    def list_pending_approvals(self, *, actor_role: Role) -> Sequence[SalaryApproval]:
        require(actor_role, Action.PROCESS_SALARY)
        return self._approvals.list_pending()

    def _decide(
        self, *, actor_id: int, actor_role: Role, approval_id: int, status: SalaryApprovalStatus
    ) -> SalaryApproval:
        require(actor_role, Action.APPROVE_SALARY, "Only root can approve salaries")

        approval = self._get(approval_id)
        if approval.status != SalaryApprovalStatus.PENDING:
            raise ValidationError("Salary approval has already been processed")

        decided = replace(approval, status=status, approved_by=int(actor_id), approved_at=self._clock())
        with self._tx.transaction():
            if not self._approvals.save_decision(decided):
                raise ValidationError("Salary approval has already been processed")

        logger.info("Salary approval #%s %s by #%s", approval_id, status.value, actor_id)
        return decided

    def _get(self, approval_id: int) -> SalaryApproval:
        approval = self._approvals.get(int(approval_id))
        if not approval:
            raise NotFound("Salary approval not found")
        return approval
