from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..absences.model import AbsenceFilter
from ..absences.repository import AbsenceRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import AbsenceStatus, AbsenceType, EmployeeStatus, ReportRange, Role
from ..core.exceptions import InvalidRangeError
from ..employees.access import Action, require
from ..employees.repository import EmployeeRepository
from .aggregator import StatsAggregator
from .model import (
    AbsenceStatistics,
    Dashboard,
    EmployeeStatsReport,
    LateStats,
    LeaveStats,
    ResignStats,
)

logger = logging.getLogger(__name__)

RANGE_PERIODS = {
    ReportRange.WEEK: timedelta(days=7),
    ReportRange.MONTH: timedelta(days=30),
    ReportRange.YEAR: timedelta(days=365),
}

LEAVE_TYPES = frozenset({AbsenceType.WITH_PERMISSION, AbsenceType.WITHOUT_PERMISSION})


def resolve_window(time_range: ReportRange | str, now: datetime) -> tuple[ReportRange, datetime, datetime]:
    """Map a symbolic range to ``[now - period, now]``."""
    try:
        parsed = ReportRange(str(getattr(time_range, "value", time_range)).strip().lower())
    except ValueError:
        allowed = ", ".join(r.value for r in ReportRange)
        raise InvalidRangeError(f"Invalid time range. Allowed: {allowed}")
    return parsed, now - RANGE_PERIODS[parsed], now


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        absences: AbsenceRepository,
        *,
        aggregator: Optional[StatsAggregator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._absences = absences
        self._aggregator = aggregator or StatsAggregator()
        self._clock = clock

    def compute_employee_stats(
        self,
        *,
        actor_role: Role,
        time_range: ReportRange | str,
        now: Optional[datetime] = None,
    ) -> EmployeeStatsReport:
        require(actor_role, Action.VIEW_REPORTS)
        parsed, start, end = resolve_window(time_range, now or self._clock())

        rows = self._attendance.get_report_rows(start=start, end=end)
        logger.debug("Employee stats (%s): %s sessions since %s", parsed.value, len(rows), start.isoformat())
        per_employee = self._aggregator.per_employee(rows)
        return EmployeeStatsReport(
            time_range=parsed,
            start=start,
            end=end,
            per_employee=per_employee,
            company_wide=self._aggregator.company_wide(rows, per_employee),
        )

    def dashboard(
        self,
        *,
        actor_role: Role,
        time_range: ReportRange | str = ReportRange.MONTH,
        now: Optional[datetime] = None,
    ) -> Dashboard:
        require(actor_role, Action.VIEW_REPORTS)
        _, start, end = resolve_window(time_range, now or self._clock())

        rows = self._attendance.get_report_rows(start=start, end=end)
        leaves = [
            v.absence
            for v in self._absences.list(AbsenceFilter(start_date=start.date(), end_date=end.date()))
            if v.absence.type in LEAVE_TYPES
        ]
        per_employee = self._aggregator.per_employee(rows)
        company = self._aggregator.company_wide(rows, per_employee)

        return Dashboard(
            total_employees=self._employees.count_by_status(EmployeeStatus.ACTIVE),
            leave_requests=len(leaves),
            approved_leaves=sum(1 for a in leaves if a.status == AbsenceStatus.APPROVED),
            average_check_in=company.average_check_in,
            average_work_hours=self._aggregator.average_work_hours(rows),
            department_stats=self._aggregator.by_department(rows),
            top_workers=company.top_workers,
        )

    def absence_statistics(self, *, actor_role: Role) -> AbsenceStatistics:
        require(actor_role, Action.VIEW_REPORTS)

        absences = [v.absence for v in self._absences.list(AbsenceFilter())]
        resigns = [a for a in absences if a.type == AbsenceType.RESIGN]

        late = self._attendance.get_late_sessions()
        late_minutes = [(r.check_in_time - r.expected_time).total_seconds() / 60 for r in late]

        return AbsenceStatistics(
            leave_stats=LeaveStats(
                with_permission=sum(
                    1 for a in absences if a.type == AbsenceType.WITH_PERMISSION and a.status == AbsenceStatus.APPROVED
                ),
                without_permission=sum(1 for a in absences if a.type == AbsenceType.WITHOUT_PERMISSION),
                pending_leaves=sum(1 for a in absences if a.status == AbsenceStatus.PENDING),
            ),
            resign_stats=ResignStats(
                approved=sum(1 for a in resigns if a.status == AbsenceStatus.APPROVED),
                pending=sum(1 for a in resigns if a.status == AbsenceStatus.PENDING),
                total=len(resigns),
            ),
            late_stats=LateStats(
                total_incidents=len(late),
                unique_employees=len({r.employee_id for r in late}),
                average_minutes=round(sum(late_minutes) / len(late_minutes), 2) if late_minutes else 0.0,
            ),
        )
