from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AbsenceStatus, AbsenceType, EmployeeStatus, Role
from ..core.exceptions import Forbidden, NotFound, ValidationError
from ..core.transaction import NullTransactionManager, TransactionManager
from ..employees.access import HR_ROLES, Action, require
from ..employees.repository import EmployeeRepository
from .classifier import AbsenceClassifier
from .model import Absence, AbsenceFilter, AbsenceView
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


class AbsenceService:
    """Use cases: submit, process and list absences."""

    def __init__(
        self,
        absences: AbsenceRepository,
        employees: EmployeeRepository,
        *,
        classifier: Optional[AbsenceClassifier] = None,
        tx: Optional[TransactionManager] = None,
    ):
        self._absences = absences
        self._employees = employees
        self._classifier = classifier or AbsenceClassifier()
        self._tx = tx or NullTransactionManager()

    def submit(
        self,
        *,
        actor_id: int,
        actor_role: Role,
        absence_date: Optional[date],
        type: AbsenceType | str | None,
        reason: Optional[str],
        employee_id: Optional[int] = None,
    ) -> Absence:
        employee_id = int(employee_id or actor_id)
        if employee_id != int(actor_id) and actor_role not in HR_ROLES:
            raise Forbidden("You can only submit absences for yourself")

        draft = self._classifier.create(employee_id=employee_id, absence_date=absence_date, type=type, reason=reason)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFound("Employee not found")
        if employee.status == EmployeeStatus.LEFT_COMPANY:
            raise ValidationError("Employee has left the company")

        absence_id = self._absences.create(draft)
        logger.info("Absence #%s (%s) submitted for employee #%s", absence_id, draft.type.value, employee_id)
        return self._get(absence_id)

    def approve(self, *, actor_id: int, actor_role: Role, absence_id: int) -> Absence:
        return self._decide(actor_id=actor_id, actor_role=actor_role, absence_id=absence_id, status=AbsenceStatus.APPROVED)

    def reject(self, *, actor_id: int, actor_role: Role, absence_id: int) -> Absence:
        return self._decide(actor_id=actor_id, actor_role=actor_role, absence_id=absence_id, status=AbsenceStatus.REJECTED)

    def _decide(self, *, actor_id: int, actor_role: Role, absence_id: int, status: AbsenceStatus) -> Absence:
        require(actor_role, Action.PROCESS_ABSENCE, "Only HR or root can process absences")

        absence = self._get(absence_id)
        decided = self._classifier.transition(absence, status, actor_id)
        if decided is absence:
            # Same decision by the same processor: nothing to write.
            return absence

        self._classifier.check_invariants(decided)
        with self._tx.transaction():
            if not self._absences.save_status(decided):
                raise NotFound("Absence not found")
            if decided.type == AbsenceType.RESIGN and decided.status == AbsenceStatus.APPROVED:
                self._employees.update_fields(decided.employee_id, {"status": EmployeeStatus.LEFT_COMPANY})
                logger.info("Employee #%s resigned (absence #%s)", decided.employee_id, absence_id)

        logger.info("Absence #%s %s by #%s", absence_id, status.value, actor_id)
        return decided

    def list_absences(self, *, actor_role: Role, flt: AbsenceFilter) -> Sequence[AbsenceView]:
        require(actor_role, Action.VIEW_ABSENCES)
        if flt.start_date and flt.end_date and flt.end_date < flt.start_date:
            raise ValidationError("end_date must be >= start_date")
        return self._absences.list(flt)

    def my_absences(self, *, actor_id: int) -> Sequence[AbsenceView]:
        return self._absences.list(AbsenceFilter(employee_id=int(actor_id)))

    def _get(self, absence_id: int) -> Absence:
        absence = self._absences.get(int(absence_id))
        if not absence:
            raise NotFound("Absence not found")
        return absence
