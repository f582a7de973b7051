from __future__ import annotations

from ...core.enums import AbsenceType, AttendanceStatus, ViolationType
from ..evaluator import CheckInEvaluation, CheckOutEvaluation
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, evaluation: CheckInEvaluation) -> StatusDecision:
        minutes = int(evaluation.lateness.total_seconds() // 60)
        return StatusDecision(
            status=AttendanceStatus.LATE,
            violation=ViolationType.LATE_ARRIVAL,
            penalty=evaluation.lateness,
            excused_by=AbsenceType.LATE_WITH_PERMISSION,
            files_absence=AbsenceType.LATE_WITHOUT_PERMISSION,
            note=f"Late check-in ({minutes} min)",
        )

    def decide_checkout(self, evaluation: CheckOutEvaluation, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
