from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Actor roles used for authorization."""

    ROOT = "root"
    HR = "hr"
    HR_MANAGER = "hr_manager"
    ACCOUNTANT = "accountant"
    EMPLOYEE = "employee"


class EmployeeStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    LEFT_COMPANY = "left_company"


class AttendanceStatus(str, Enum):
    """Punctuality status stored on each attendance session."""

    ON_TIME = "on_time"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    LATE_AND_EARLY_LEAVE = "late_and_early_leave"


class ViolationType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    EARLY_LEAVE = "early_leave"


class AbsenceType(str, Enum):
    WITH_PERMISSION = "with_permission"
    WITHOUT_PERMISSION = "without_permission"
    RESIGN = "resign"
    LATE_WITH_PERMISSION = "late_with_permission"
    LATE_WITHOUT_PERMISSION = "late_without_permission"
    LEAVE_WITH_PERMISSION = "leave_with_permission"
    LEAVE_WITHOUT_PERMISSION = "leave_without_permission"


class AbsenceStatus(str, Enum):
    """Approval workflow state of an absence."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SalaryApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportRange(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class OutboxStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
