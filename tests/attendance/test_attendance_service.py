from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.absences.model import Absence
from src.timekeeping.timekeeping.attendance.service import AttendanceService
from src.timekeeping.timekeeping.core.enums import (
    AbsenceStatus,
    AbsenceType,
    AttendanceStatus,
    EmployeeStatus,
    ViolationType,
)
from src.timekeeping.timekeeping.core.exceptions import (
    ConfigurationError,
    DuplicateSessionError,
    NotFound,
    ValidationError,
)
from src.timekeeping.timekeeping.rules.service import RuleService

TODAY = date(2026, 3, 2)


@pytest.fixture
def worker(employees):
    return employees.add(employee_id=7, nickname="lan", full_name="Lan Tran", department="Ops")


@pytest.fixture
def service(attendance, violations, absences, employees, rules, ledger, tx, fixed_now):
    return AttendanceService(
        attendance,
        violations,
        absences,
        employees,
        RuleService(rules, ledger),
        tx=tx,
        clock=lambda: fixed_now,
    )


def test_check_in_on_time_records_session_without_violation(service, worker, violations, absences):
    result = service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 8, 55))

    assert result.record.status == AttendanceStatus.ON_TIME
    assert result.record.expected_time == datetime(2026, 3, 2, 9, 0)
    assert result.record.on_time is True
    assert result.violation is None
    assert result.absence is None
    assert violations.items == []
    assert absences.find_for_date(employee_id=7, absence_date=TODAY, type=AbsenceType.LATE_WITHOUT_PERMISSION) is None


def test_check_in_late_creates_violation_and_auto_absence_in_one_transaction(service, worker, violations, tx):
    result = service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 9, 30))

    assert result.record.status == AttendanceStatus.LATE
    assert result.record.note == "Late check-in (30 min)"
    assert len(violations.items) == 1
    violation = violations.items[0]
    assert violation.type == ViolationType.LATE_ARRIVAL
    assert violation.violation_date == TODAY
    assert violation.deduction_amount == pytest.approx(0.025)
    assert result.absence is not None
    assert result.absence.type == AbsenceType.LATE_WITHOUT_PERMISSION
    assert result.absence.status == AbsenceStatus.PENDING
    assert result.absence.processed_by is None
    assert tx.opened == 1 and tx.committed == 1


def test_check_in_twice_same_day_is_rejected(service, worker):
    service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 8, 50))

    with pytest.raises(DuplicateSessionError):
        service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 10, 0))


def test_check_in_with_open_session_from_previous_day_is_rejected(service, worker):
    service.check_in(worker.employee_id, now=datetime(2026, 3, 1, 8, 50))

    with pytest.raises(DuplicateSessionError):
        service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 8, 50))


def test_check_in_excused_by_approved_permission(service, worker, absences, violations):
    absences.create(
        Absence(
            employee_id=worker.employee_id,
            absence_date=TODAY,
            type=AbsenceType.LATE_WITH_PERMISSION,
            reason="Doctor appointment",
            status=AbsenceStatus.APPROVED,
            processed_by=1,
            processed_at=datetime(2026, 3, 1, 17, 0),
        )
    )

    result = service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 10, 0))

    assert result.record.status == AttendanceStatus.LATE
    assert result.excused is True
    assert result.violation is None
    assert result.absence is None
    assert violations.items == []


def test_pending_permission_does_not_excuse(service, worker, absences, violations):
    absences.create(
        Absence(
            employee_id=worker.employee_id,
            absence_date=TODAY,
            type=AbsenceType.LATE_WITH_PERMISSION,
            reason="Traffic",
        )
    )

    result = service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 9, 10))

    assert result.excused is False
    assert len(violations.items) == 1


def test_check_in_requires_active_employee(service, employees):
    employees.add(employee_id=8, status=EmployeeStatus.PENDING)

    with pytest.raises(ValidationError, match="Only active employees"):
        service.check_in(8)


def test_check_in_unknown_employee(service):
    with pytest.raises(NotFound):
        service.check_in(404)


def test_check_in_without_rule_is_configuration_error(
    attendance, violations, absences, employees, ledger, worker, make_rules
):
    service = AttendanceService(attendance, violations, absences, employees, RuleService(make_rules(), ledger))

    with pytest.raises(ConfigurationError):
        service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 9, 0))


def test_check_out_early_after_late_check_in(service, worker, violations):
    service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 9, 30))

    result = service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 17, 0))

    assert result.record.status == AttendanceStatus.LATE_AND_EARLY_LEAVE
    assert result.record.check_out_time == datetime(2026, 3, 2, 17, 0)
    assert result.violation.type == ViolationType.EARLY_LEAVE
    assert result.violation.deduction_amount == pytest.approx(0.05)
    assert result.absence.type == AbsenceType.LEAVE_WITHOUT_PERMISSION
    assert [v.type for v in violations.items] == [ViolationType.LATE_ARRIVAL, ViolationType.EARLY_LEAVE]


def test_check_out_after_cutoff_keeps_on_time(service, worker, violations):
    service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 8, 58))

    result = service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 18, 5))

    assert result.record.status == AttendanceStatus.ON_TIME
    assert result.violation is None
    assert violations.items == []


def test_check_out_without_check_out_rule_skips_early_check(
    attendance, violations, absences, employees, ledger, worker, make_rules
):
    rules = make_rules({"check_in_time": "09:00"})
    service = AttendanceService(attendance, violations, absences, employees, RuleService(rules, ledger))
    service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 8, 58))

    result = service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 12, 0))

    assert result.record.status == AttendanceStatus.ON_TIME
    assert violations.items == []


def test_check_out_without_check_in(service, worker):
    with pytest.raises(NotFound, match="No check-in found"):
        service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 18, 0))


def test_check_out_twice(service, worker):
    service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 8, 58))
    service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 18, 0))

    with pytest.raises(ValidationError, match="already checked out"):
        service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 18, 30))


def test_check_out_before_check_in_is_rejected(service, worker):
    service.check_in(worker.employee_id, now=datetime(2026, 3, 2, 9, 0))

    with pytest.raises(ValidationError):
        service.check_out(worker.employee_id, now=datetime(2026, 3, 2, 8, 0))


def test_history_and_today_record(service, worker, fixed_now):
    service.check_in(worker.employee_id, now=datetime(2026, 2, 27, 8, 50))
    service.check_out(worker.employee_id, now=datetime(2026, 2, 27, 18, 0))
    service.check_in(worker.employee_id, now=fixed_now)

    history = service.get_history(worker.employee_id, limit=5)
    today = service.get_today_record(worker.employee_id)

    assert [r.work_date for r in history] == [TODAY, date(2026, 2, 27)]
    assert today is not None and today.work_date == TODAY
    assert today.is_open
