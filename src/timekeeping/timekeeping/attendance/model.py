from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, EmployeeStatus, ViolationType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one work session (check-in, later check-out)."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: datetime
    expected_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def on_time(self) -> bool:
        return self.check_in_time <= self.expected_time

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat(),
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "expected_time": self.expected_time.isoformat(),
            "on_time": self.on_time,
            "status": self.status.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class Violation:
    """Derived penalty record for late arrival or early leave."""

    violation_id: int
    employee_id: int
    violation_date: date
    type: ViolationType
    deduction_amount: float
    details: str = ""
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.violation_id,
            "user_id": self.employee_id,
            "date": self.violation_date.isoformat(),
            "type": self.type.value,
            "deduction_amount": self.deduction_amount,
            "details": self.details,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports (session joined with the employee)."""

    employee_id: int
    full_name: str
    nickname: str
    department: str
    employee_status: EmployeeStatus
    work_date: date
    check_in_time: datetime
    expected_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
