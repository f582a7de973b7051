from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..absences.classifier import AbsenceClassifier
from ..absences.model import Absence
from ..absences.repository import AbsenceRepository
from ..common.datetime_utils import now_local
from ..core.constants import CHECK_IN_RULE, CHECK_OUT_RULE
from ..core.enums import AbsenceType, EmployeeStatus
from ..core.exceptions import DuplicateSessionError, NotFound, ValidationError
from ..core.transaction import NullTransactionManager, TransactionManager
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rules.service import RuleService
from .evaluator import AttendanceEvaluator, CheckOutEvaluation
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, Violation
from .repository import AttendanceRepository, ViolationRepository
from .strategies.base import StatusDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceResult:
    record: AttendanceRecord
    violation: Optional[Violation] = None
    absence: Optional[Absence] = None
    excused: bool = False

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["violation"] = self.violation.to_dict() if self.violation else None
        data["absence_id"] = self.absence.absence_id if self.absence else None
        data["excused"] = self.excused
        return data


class AttendanceService:
    """Check-in / check-out use cases.

    The session, its violation and the auto-filed absence are written in
    one transaction.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        violations: ViolationRepository,
        absences: AbsenceRepository,
        employees: EmployeeRepository,
        rules: RuleService,
        *,
        evaluator: Optional[AttendanceEvaluator] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        classifier: Optional[AbsenceClassifier] = None,
        tx: Optional[TransactionManager] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._violations = violations
        self._absences = absences
        self._employees = employees
        self._rules = rules
        self._evaluator = evaluator or AttendanceEvaluator()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._classifier = classifier or AbsenceClassifier(clock=clock)
        self._tx = tx or NullTransactionManager()
        self._clock = clock

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceResult:
        now = now or self._clock()
        today = now.date()

        self._get_working_employee(employee_id)

        if self._attendance.get_for_employee_and_date(employee_id, today):
            raise DuplicateSessionError("You have already checked in today")
        if self._attendance.get_open_for_employee(employee_id):
            raise DuplicateSessionError("Previous session has not been checked out")

        expected = self._rules.expected_time(CHECK_IN_RULE, today)
        evaluation = self._evaluator.evaluate(now, expected)
        decision = self._factory.for_checkin(evaluation).decide_checkin(evaluation)
        excused = self._is_excused(employee_id, today, decision)

        with self._tx.transaction():
            attendance_id = self._attendance.create_checkin(
                employee_id=employee_id,
                work_date=today,
                check_in_time=now,
                expected_time=expected,
                status=decision.status,
                note=decision.note,
            )
            violation, absence = self._record_breach(employee_id, today, decision, excused)

        record = self._attendance.get(attendance_id)
        if not record:
            raise NotFound("Attendance not found")
        logger.info("Employee #%s checked in at %s (%s)", employee_id, now.isoformat(), decision.status.value)
        return AttendanceResult(record=record, violation=violation, absence=absence, excused=excused)

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceResult:
        now = now or self._clock()

        self._get_working_employee(employee_id)

        record = self._attendance.get_open_for_employee(employee_id)
        if not record:
            today_record = self._attendance.get_for_employee_and_date(employee_id, now.date())
            if today_record and not today_record.is_open:
                raise ValidationError("You have already checked out today")
            raise NotFound("No check-in found for today")
        if now < record.check_in_time:
            raise ValidationError("Check-out time cannot be before check-in time")

        expected_out = self._rules.optional_expected_time(CHECK_OUT_RULE, record.work_date)
        if expected_out is None:
            evaluation = CheckOutEvaluation(early=False, early_by=timedelta(0))
        else:
            evaluation = self._evaluator.evaluate_checkout(now, expected_out)
        decision = self._factory.for_checkout(evaluation).decide_checkout(evaluation, record.status)
        excused = self._is_excused(employee_id, record.work_date, decision)

        with self._tx.transaction():
            if not self._attendance.update_checkout(
                attendance_id=record.attendance_id,
                check_out_time=now,
                status=decision.status,
                note=decision.note or record.note,
            ):
                raise ValidationError("You have already checked out today")
            violation, absence = self._record_breach(employee_id, record.work_date, decision, excused)

        updated = self._attendance.get(record.attendance_id)
        if not updated:
            raise NotFound("Attendance not found")
        logger.info("Employee #%s checked out at %s (%s)", employee_id, now.isoformat(), decision.status.value)
        return AttendanceResult(record=updated, violation=violation, absence=absence, excused=excused)

    def get_history(self, employee_id: int, *, limit: int = 15) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_employee(employee_id, int(limit))

    def get_today_record(self, employee_id: int, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, today or self._clock().date())

    def _get_working_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFound("Employee not found")
        if employee.status != EmployeeStatus.ACTIVE:
            raise ValidationError("Only active employees can record attendance")
        return employee

    def _is_excused(self, employee_id: int, on_date: date, decision: StatusDecision) -> bool:
        if decision.violation is None or decision.excused_by is None:
            return False
        permit = self._absences.find_for_date(employee_id=employee_id, absence_date=on_date, type=decision.excused_by)
        return bool(permit and self._classifier.excuses(permit))

    def _record_breach(
        self, employee_id: int, on_date: date, decision: StatusDecision, excused: bool
    ) -> tuple[Optional[Violation], Optional[Absence]]:
        if decision.violation is None or excused:
            return None, None

        violation = self._violations.get(employee_id=employee_id, violation_date=on_date, type=decision.violation)
        if violation is None:
            amount = self._evaluator.deduction(decision.penalty)
            violation_id = self._violations.create(
                employee_id=employee_id,
                violation_date=on_date,
                type=decision.violation,
                deduction_amount=amount,
                details=decision.note or "",
            )
            violation = Violation(
                violation_id=violation_id,
                employee_id=employee_id,
                violation_date=on_date,
                type=decision.violation,
                deduction_amount=amount,
                details=decision.note or "",
            )
            logger.info("Violation %s for employee #%s on %s: %.4f", decision.violation.value, employee_id, on_date, amount)

        absence = None
        if decision.files_absence is not None:
            absence = self._file_absence(employee_id, on_date, decision.files_absence, decision.note)
        return violation, absence

    def _file_absence(self, employee_id: int, on_date: date, absence_type: AbsenceType, note: Optional[str]) -> Absence:
        existing = self._absences.find_for_date(employee_id=employee_id, absence_date=on_date, type=absence_type)
        if existing:
            return existing
        draft = self._classifier.create(
            employee_id=employee_id,
            absence_date=on_date,
            type=absence_type,
            reason=note or absence_type.value,
        )
        absence_id = self._absences.create(draft)
        return self._absences.get(absence_id) or draft
