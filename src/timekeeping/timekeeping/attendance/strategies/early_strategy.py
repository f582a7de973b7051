from __future__ import annotations

from ...core.enums import AbsenceType, AttendanceStatus, ViolationType
from ..evaluator import CheckInEvaluation, CheckOutEvaluation
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Check-out before the configured cutoff."""

    def decide_checkin(self, evaluation: CheckInEvaluation) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)

    def decide_checkout(self, evaluation: CheckOutEvaluation, current: AttendanceStatus) -> StatusDecision:
        status = AttendanceStatus.LATE_AND_EARLY_LEAVE if current == AttendanceStatus.LATE else AttendanceStatus.EARLY_LEAVE
        minutes = int(evaluation.early_by.total_seconds() // 60)
        return StatusDecision(
            status=status,
            violation=ViolationType.EARLY_LEAVE,
            penalty=evaluation.early_by,
            excused_by=AbsenceType.LEAVE_WITH_PERMISSION,
            files_absence=AbsenceType.LEAVE_WITHOUT_PERMISSION,
            note=f"Early check-out ({minutes} min)",
        )
