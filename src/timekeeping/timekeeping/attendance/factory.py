from __future__ import annotations

from dataclasses import dataclass

from .evaluator import CheckInEvaluation, CheckOutEvaluation
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, evaluation: CheckInEvaluation) -> AttendanceStrategy:
        if evaluation.on_time:
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(self, evaluation: CheckOutEvaluation) -> AttendanceStrategy:
        if evaluation.early:
            return EarlyLeaveStrategy()
        return NormalStrategy()
