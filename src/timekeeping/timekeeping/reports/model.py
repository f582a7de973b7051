from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_hms
from ..core.enums import ReportRange


def _hours(seconds: int) -> float:
    return round(seconds / 3600, 2)


@dataclass(frozen=True)
class EmployeeStats:
    employee_id: int
    full_name: str
    nickname: str
    department: str
    sessions: int
    # Seconds since midnight.
    average_check_in: Optional[int]
    average_check_out: Optional[int]
    effective_seconds: int
    active: bool = True

    @property
    def total_hours(self) -> float:
        return _hours(self.effective_seconds)

    def to_dict(self) -> dict:
        return {
            "user_id": self.employee_id,
            "employee_name": self.full_name or self.nickname,
            "department": self.department,
            "sessions": self.sessions,
            "average_check_in_time": format_hms(self.average_check_in),
            "average_check_out_time": format_hms(self.average_check_out),
            "work_hours": format_hms(self.effective_seconds),
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class RankedWorker:
    rank: int
    stats: EmployeeStats

    def to_dict(self) -> dict:
        data = self.stats.to_dict()
        data["rank"] = self.rank
        return data


@dataclass(frozen=True)
class CompanyStats:
    total_seconds: int
    average_check_in: Optional[int]
    average_check_out: Optional[int]
    top_workers: list[RankedWorker] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return _hours(self.total_seconds)

    def to_dict(self) -> dict:
        return {
            "total_hours": self.total_hours,
            "average_check_in_time": format_hms(self.average_check_in),
            "average_check_out_time": format_hms(self.average_check_out),
            "top_workers": [w.to_dict() for w in self.top_workers],
        }


@dataclass(frozen=True)
class EmployeeStatsReport:
    time_range: ReportRange
    start: datetime
    end: datetime
    per_employee: list[EmployeeStats]
    company_wide: CompanyStats

    def to_dict(self) -> dict:
        return {
            "time_range": self.time_range.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "per_employee": [s.to_dict() for s in self.per_employee],
            "company_wide": self.company_wide.to_dict(),
        }


@dataclass(frozen=True)
class DepartmentStat:
    name: str
    employee_count: int
    average_check_in: Optional[int]
    average_work_hours: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "employee_count": self.employee_count,
            "average_check_in_time": format_hms(self.average_check_in),
            "average_work_hours": self.average_work_hours,
        }


@dataclass(frozen=True)
class Dashboard:
    total_employees: int
    leave_requests: int
    approved_leaves: int
    average_check_in: Optional[int]
    average_work_hours: float
    department_stats: list[DepartmentStat]
    top_workers: list[RankedWorker]

    def to_dict(self) -> dict:
        return {
            "total_employees": self.total_employees,
            "leave_requests": self.leave_requests,
            "approved_leaves": self.approved_leaves,
            "average_check_in_time": format_hms(self.average_check_in),
            "average_work_hours": self.average_work_hours,
            "department_stats": [d.to_dict() for d in self.department_stats],
            "top_workers": [w.to_dict() for w in self.top_workers],
        }


@dataclass(frozen=True)
class LeaveStats:
    with_permission: int
    without_permission: int
    pending_leaves: int


@dataclass(frozen=True)
class ResignStats:
    approved: int
    pending: int
    total: int


@dataclass(frozen=True)
class LateStats:
    total_incidents: int
    unique_employees: int
    average_minutes: float


@dataclass(frozen=True)
class AbsenceStatistics:
    leave_stats: LeaveStats
    resign_stats: ResignStats
    late_stats: LateStats

    def to_dict(self) -> dict:
        return {
            "leave_stats": asdict(self.leave_stats),
            "resign_stats": asdict(self.resign_stats),
            "late_stats": asdict(self.late_stats),
        }
