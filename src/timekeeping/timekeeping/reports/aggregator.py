from __future__ import annotations

from typing import Optional, Sequence

from ..attendance.model import AttendanceReportRow
from ..common.datetime_utils import average_time_of_day
from ..core.constants import DEFAULT_TOP_N
from ..core.enums import EmployeeStatus
from .calculator.base import WorkTimeCalculator
from .calculator.effective_calculator import EffectiveHoursCalculator
from .model import CompanyStats, DepartmentStat, EmployeeStats, RankedWorker


class StatsAggregator:
    """Pure aggregation over report rows.

    Row order is the tie-breaker everywhere, so equal inputs give equal
    outputs.
    """

    def __init__(self, *, calculator: Optional[WorkTimeCalculator] = None, top_n: int = DEFAULT_TOP_N):
        self._calculator = calculator or EffectiveHoursCalculator()
        self._top_n = int(top_n)

    def per_employee(self, rows: Sequence[AttendanceReportRow]) -> list[EmployeeStats]:
        grouped: dict[int, list[AttendanceReportRow]] = {}
        for r in rows:
            grouped.setdefault(r.employee_id, []).append(r)

        out = []
        for employee_id, sessions in grouped.items():
            first = sessions[0]
            out.append(
                EmployeeStats(
                    employee_id=employee_id,
                    full_name=first.full_name,
                    nickname=first.nickname,
                    department=first.department,
                    sessions=len(sessions),
                    average_check_in=average_time_of_day([s.check_in_time for s in sessions]),
                    average_check_out=average_time_of_day([s.check_out_time for s in sessions if s.check_out_time]),
                    effective_seconds=sum(self._calculator.effective_seconds(s) for s in sessions),
                    active=first.employee_status == EmployeeStatus.ACTIVE,
                )
            )
        return out

    def company_wide(self, rows: Sequence[AttendanceReportRow], stats: Sequence[EmployeeStats]) -> CompanyStats:
        active = [s for s in stats if s.active]
        return CompanyStats(
            total_seconds=sum(s.effective_seconds for s in active),
            average_check_in=average_time_of_day([r.check_in_time for r in rows]),
            average_check_out=average_time_of_day([r.check_out_time for r in rows if r.check_out_time]),
            top_workers=self.rank(active),
        )

    def rank(self, stats: Sequence[EmployeeStats]) -> list[RankedWorker]:
        """Top-N by effective time; equal totals share a rank."""
        ordered = sorted(stats, key=lambda s: -s.effective_seconds)[: self._top_n]
        ranked: list[RankedWorker] = []
        for position, s in enumerate(ordered, start=1):
            if ranked and ranked[-1].stats.effective_seconds == s.effective_seconds:
                ranked.append(RankedWorker(rank=ranked[-1].rank, stats=s))
            else:
                ranked.append(RankedWorker(rank=position, stats=s))
        return ranked

    def average_work_hours(self, rows: Sequence[AttendanceReportRow]) -> float:
        closed = [r for r in rows if r.check_out_time]
        if not closed:
            return 0.0
        total = sum(self._calculator.effective_seconds(r) for r in closed)
        return round(total / len(closed) / 3600, 2)

    def by_department(self, rows: Sequence[AttendanceReportRow]) -> list[DepartmentStat]:
        grouped: dict[str, list[AttendanceReportRow]] = {}
        for r in rows:
            grouped.setdefault(r.department or "", []).append(r)

        return [
            DepartmentStat(
                name=name,
                employee_count=len({r.employee_id for r in dept_rows}),
                average_check_in=average_time_of_day([r.check_in_time for r in dept_rows]),
                average_work_hours=self.average_work_hours(dept_rows),
            )
            for name, dept_rows in grouped.items()
        ]
