from __future__ import annotations

from contextlib import contextmanager
from dataclasses import fields, replace
from datetime import date, datetime
from typing import Any, Optional

import pytest

from src.timekeeping.timekeeping.absences.model import Absence, AbsenceFilter, AbsenceView
from src.timekeeping.timekeeping.attendance.model import AttendanceRecord, AttendanceReportRow, Violation
from src.timekeeping.timekeeping.core.enums import (
    AttendanceStatus,
    EmployeeStatus,
    OutboxStatus,
    Role,
    SalaryApprovalStatus,
    ViolationType,
)
from src.timekeeping.timekeeping.core.exceptions import ExternalNotificationError
from src.timekeeping.timekeeping.employees.model import Employee, EmployeeFilter
from src.timekeeping.timekeeping.ledger.model import OutboxEntry
from src.timekeeping.timekeeping.ledger.service import LedgerNotifier
from src.timekeeping.timekeeping.payroll.model import SalaryApproval
from src.timekeeping.timekeeping.rules.model import CompanyRule

FIXED_NOW = datetime(2026, 3, 2, 9, 0, 0)


class InMemoryEmployees:
    def __init__(self):
        self._by_id: dict[int, Employee] = {}
        self._next_id = 1

    def add(self, **kwargs) -> Employee:
        kwargs.setdefault("employee_id", self._next_id)
        kwargs.setdefault("nickname", f"emp{kwargs['employee_id']}")
        kwargs.setdefault("role", Role.EMPLOYEE)
        kwargs.setdefault("status", EmployeeStatus.ACTIVE)
        employee = Employee(**kwargs)
        self._by_id[employee.employee_id] = employee
        self._next_id = max(self._next_id, employee.employee_id + 1)
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.email == email), None)

    def get_by_nickname(self, nickname: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.nickname == nickname), None)

    def create(self, *, nickname, role, status, onboard_date, salary=0.0, wallet_address="") -> int:
        employee = self.add(
            nickname=nickname,
            role=role,
            status=status,
            onboard_date=onboard_date,
            salary=salary,
            wallet_address=wallet_address,
        )
        return employee.employee_id

    def update_fields(self, employee_id: int, values: dict[str, Any]) -> bool:
        employee = self._by_id.get(int(employee_id))
        if not employee:
            return False
        known = {f.name for f in fields(Employee)}
        self._by_id[employee.employee_id] = replace(employee, **{k: v for k, v in values.items() if k in known})
        return True

    def list(self, flt: EmployeeFilter):
        out = []
        for e in self._by_id.values():
            if flt.department and e.department != flt.department:
                continue
            if flt.status and e.status != flt.status:
                continue
            if flt.role and e.role != flt.role:
                continue
            if flt.onboard_from and (not e.onboard_date or e.onboard_date < flt.onboard_from):
                continue
            if flt.onboard_to and (not e.onboard_date or e.onboard_date > flt.onboard_to):
                continue
            out.append(e)
        return out

    def count_by_status(self, status: EmployeeStatus) -> int:
        return sum(1 for e in self._by_id.values() if e.status == status)


class InMemoryAttendance:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_id: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(int(attendance_id))

    def get_recent_for_employee(self, employee_id: int, limit: int):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return items[:limit]

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self._by_id.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self._by_id.values() if r.employee_id == employee_id and r.is_open), None)

    def create_checkin(self, *, employee_id, work_date, check_in_time, expected_time, status, note=None) -> int:
        attendance_id = self._next_id
        self._next_id += 1
        self._by_id[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=check_in_time,
            expected_time=expected_time,
            check_out_time=None,
            status=status,
            note=note,
        )
        return attendance_id

    def add_session(
        self,
        employee_id: int,
        check_in_time: datetime,
        check_out_time: Optional[datetime],
        expected_time: Optional[datetime] = None,
    ) -> int:
        expected_time = expected_time or check_in_time.replace(hour=9, minute=0, second=0)
        status = AttendanceStatus.LATE if check_in_time > expected_time else AttendanceStatus.ON_TIME
        attendance_id = self.create_checkin(
            employee_id=employee_id,
            work_date=check_in_time.date(),
            check_in_time=check_in_time,
            expected_time=expected_time,
            status=status,
        )
        if check_out_time:
            self._by_id[attendance_id] = replace(self._by_id[attendance_id], check_out_time=check_out_time)
        return attendance_id

    def update_checkout(self, *, attendance_id, check_out_time, status, note=None) -> bool:
        record = self._by_id.get(int(attendance_id))
        if not record or not record.is_open:
            return False
        self._by_id[record.attendance_id] = replace(record, check_out_time=check_out_time, status=status, note=note)
        return True

    def get_report_rows(self, *, start, end, employee_id=None, department=None):
        rows = []
        for r in self._by_id.values():
            if not (start <= r.check_in_time <= end):
                continue
            e = self._employees.get_by_id(r.employee_id)
            if employee_id and r.employee_id != employee_id:
                continue
            if department and e.department != department:
                continue
            rows.append(
                AttendanceReportRow(
                    employee_id=r.employee_id,
                    full_name=e.full_name,
                    nickname=e.nickname,
                    department=e.department,
                    employee_status=e.status,
                    work_date=r.work_date,
                    check_in_time=r.check_in_time,
                    expected_time=r.expected_time,
                    check_out_time=r.check_out_time,
                    status=r.status,
                )
            )
        return rows

    def get_late_sessions(self):
        return [r for r in self._by_id.values() if r.check_in_time > r.expected_time]


class InMemoryViolations:
    def __init__(self):
        self.items: list[Violation] = []

    def get(self, *, employee_id: int, violation_date: date, type: ViolationType) -> Optional[Violation]:
        return next(
            (
                v
                for v in self.items
                if v.employee_id == employee_id and v.violation_date == violation_date and v.type == type
            ),
            None,
        )

    def create(self, *, employee_id, violation_date, type, deduction_amount, details) -> int:
        violation_id = len(self.items) + 1
        self.items.append(
            Violation(
                violation_id=violation_id,
                employee_id=employee_id,
                violation_date=violation_date,
                type=type,
                deduction_amount=deduction_amount,
                details=details,
            )
        )
        return violation_id

    def list_for_employee(self, *, employee_id, start_date, end_date):
        return [
            v for v in self.items if v.employee_id == employee_id and start_date <= v.violation_date <= end_date
        ]


class InMemoryAbsences:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_id: dict[int, Absence] = {}
        self._next_id = 1

    def create(self, absence: Absence) -> int:
        absence_id = self._next_id
        self._next_id += 1
        self._by_id[absence_id] = replace(absence, absence_id=absence_id)
        return absence_id

    def get(self, absence_id: int) -> Optional[Absence]:
        return self._by_id.get(int(absence_id))

    def find_for_date(self, *, employee_id, absence_date, type) -> Optional[Absence]:
        matches = [
            a
            for a in self._by_id.values()
            if a.employee_id == employee_id and a.absence_date == absence_date and a.type == type
        ]
        return matches[-1] if matches else None

    def save_status(self, absence: Absence) -> bool:
        if absence.absence_id not in self._by_id:
            return False
        self._by_id[absence.absence_id] = absence
        return True

    def list(self, flt: AbsenceFilter):
        out = []
        for a in self._by_id.values():
            e = self._employees.get_by_id(a.employee_id)
            department = e.department if e else ""
            if flt.type and a.type != flt.type:
                continue
            if flt.status and a.status != flt.status:
                continue
            if flt.department and department != flt.department:
                continue
            if flt.start_date and a.absence_date < flt.start_date:
                continue
            if flt.end_date and a.absence_date > flt.end_date:
                continue
            if flt.employee_id and a.employee_id != flt.employee_id:
                continue
            processor = self._employees.get_by_id(a.processed_by) if a.processed_by else None
            out.append(
                AbsenceView(
                    absence=a,
                    full_name=e.full_name if e else "",
                    department=department,
                    processor_name=processor.full_name if processor else None,
                )
            )
        return out


class InMemoryRules:
    def __init__(self, rules: Optional[dict[str, str]] = None):
        self._rules = {name: CompanyRule(rule_name=name, details=v) for name, v in (rules or {}).items()}

    def get(self, rule_name: str) -> Optional[CompanyRule]:
        return self._rules.get(rule_name)

    def list_all(self):
        return [self._rules[k] for k in sorted(self._rules)]

    def upsert(self, *, rule_name, details, created_by) -> None:
        self._rules[rule_name] = CompanyRule(rule_name=rule_name, details=details, created_by=created_by)


class InMemoryOutbox:
    def __init__(self):
        self.entries: dict[int, OutboxEntry] = {}

    def add(self, *, method, args, error, created_at) -> int:
        entry_id = len(self.entries) + 1
        self.entries[entry_id] = OutboxEntry(
            entry_id=entry_id,
            method=method,
            args=dict(args),
            status=OutboxStatus.PENDING,
            attempts=1,
            created_at=created_at,
            last_error=error,
        )
        return entry_id

    def list_pending(self, *, limit: int):
        return [e for e in self.entries.values() if e.status == OutboxStatus.PENDING][:limit]

    def mark_sent(self, entry_id: int, *, sent_at) -> bool:
        self.entries[entry_id] = replace(self.entries[entry_id], status=OutboxStatus.SENT, sent_at=sent_at)
        return True

    def record_failure(self, entry_id: int, *, error: str) -> bool:
        entry = self.entries[entry_id]
        self.entries[entry_id] = replace(entry, attempts=entry.attempts + 1, last_error=error)
        return True


class InMemorySalaryApprovals:
    def __init__(self):
        self._by_id: dict[int, SalaryApproval] = {}

    def create(self, *, employee_id, month, base_salary, deductions, bonus, final_salary) -> int:
        approval_id = len(self._by_id) + 1
        self._by_id[approval_id] = SalaryApproval(
            approval_id=approval_id,
            employee_id=employee_id,
            month=month,
            base_salary=base_salary,
            deductions=deductions,
            bonus=bonus,
            final_salary=final_salary,
        )
        return approval_id

    def get(self, approval_id: int) -> Optional[SalaryApproval]:
        return self._by_id.get(int(approval_id))

    def find_for_month(self, *, employee_id, month):
        return [a for a in self._by_id.values() if a.employee_id == employee_id and a.month == month]

    def save_decision(self, approval: SalaryApproval) -> bool:
        current = self._by_id.get(approval.approval_id)
        if not current or current.status != SalaryApprovalStatus.PENDING:
            return False
        self._by_id[approval.approval_id] = approval
        return True

    def list_pending(self):
        return [a for a in self._by_id.values() if a.status == SalaryApprovalStatus.PENDING]


class RecordingLedgerClient:
    """Stands in for LedgerClient; ``fail=True`` makes every call fail."""

    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, dict]] = []

    def call(self, method: str, args: dict) -> None:
        if self.fail:
            raise ExternalNotificationError(f"Ledger call {method} failed with status: 503")
        self.calls.append((method, dict(args)))


class RecordingTx:
    def __init__(self):
        self.opened = 0
        self.committed = 0

    @contextmanager
    def transaction(self):
        self.opened += 1
        yield
        self.committed += 1


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def attendance(employees) -> InMemoryAttendance:
    return InMemoryAttendance(employees)


@pytest.fixture
def violations() -> InMemoryViolations:
    return InMemoryViolations()


@pytest.fixture
def absences(employees) -> InMemoryAbsences:
    return InMemoryAbsences(employees)


@pytest.fixture
def rules() -> InMemoryRules:
    return InMemoryRules({"check_in_time": "09:00", "check_out_time": "18:00"})


@pytest.fixture
def outbox() -> InMemoryOutbox:
    return InMemoryOutbox()


@pytest.fixture
def approvals() -> InMemorySalaryApprovals:
    return InMemorySalaryApprovals()


@pytest.fixture
def ledger_client() -> RecordingLedgerClient:
    return RecordingLedgerClient()


@pytest.fixture
def ledger(ledger_client, outbox) -> LedgerNotifier:
    return LedgerNotifier(ledger_client, outbox, clock=lambda: FIXED_NOW)


@pytest.fixture
def tx() -> RecordingTx:
    return RecordingTx()


@pytest.fixture
def failing_ledger_client() -> RecordingLedgerClient:
    return RecordingLedgerClient(fail=True)


@pytest.fixture
def failing_ledger(failing_ledger_client, outbox) -> LedgerNotifier:
    return LedgerNotifier(failing_ledger_client, outbox, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_rules():
    return InMemoryRules
