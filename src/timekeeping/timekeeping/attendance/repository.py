from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, ViolationType
from .model import AttendanceRecord, AttendanceReportRow, Violation


class AttendanceRepository(Protocol):
    """Append-only store of work sessions."""

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        """The session without check-out, if any."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        expected_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Sessions with ``start <= check_in_time <= end`` in insertion order."""

        raise NotImplementedError

    def get_late_sessions(self) -> Sequence[AttendanceRecord]:
        """All sessions whose check-in is after the expected time."""

        raise NotImplementedError


class ViolationRepository(Protocol):
    def get(self, *, employee_id: int, violation_date: date, type: ViolationType) -> Optional[Violation]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        violation_date: date,
        type: ViolationType,
        deduction_amount: float,
        details: str,
    ) -> int:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Violation]:
        raise NotImplementedError
