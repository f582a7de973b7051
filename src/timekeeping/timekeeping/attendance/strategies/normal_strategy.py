from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..evaluator import CheckInEvaluation, CheckOutEvaluation
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out."""

    def decide_checkin(self, evaluation: CheckInEvaluation) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)

    def decide_checkout(self, evaluation: CheckOutEvaluation, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
