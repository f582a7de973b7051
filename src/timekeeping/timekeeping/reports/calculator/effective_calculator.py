from __future__ import annotations

from .base import WorkTimeCalculator
from ...attendance.model import AttendanceReportRow


class EffectiveHoursCalculator(WorkTimeCalculator):
    """Effective time: (out - in) - lateness, floored at 0. Open sessions count as 0."""

    def lateness_seconds(self, row: AttendanceReportRow) -> int:
        return max(int((row.check_in_time - row.expected_time).total_seconds()), 0)

    def effective_seconds(self, row: AttendanceReportRow) -> int:
        if not row.check_out_time:
            return 0
        worked = int((row.check_out_time - row.check_in_time).total_seconds())
        return max(worked - self.lateness_seconds(row), 0)
