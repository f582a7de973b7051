from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.constants import DEFAULT_DEDUCTION_RATE

_ZERO = timedelta(0)


@dataclass(frozen=True)
class CheckInEvaluation:
    on_time: bool
    lateness: timedelta


@dataclass(frozen=True)
class CheckOutEvaluation:
    early: bool
    early_by: timedelta


class AttendanceEvaluator:
    """Punctuality rules: lateness, early leave and their deductions."""

    def __init__(self, *, rate: float = DEFAULT_DEDUCTION_RATE):
        self._rate = float(rate)

    @property
    def rate(self) -> float:
        return self._rate

    def evaluate(self, check_in_time: datetime, expected_time: datetime) -> CheckInEvaluation:
        lateness = max(_ZERO, check_in_time - expected_time)
        return CheckInEvaluation(on_time=lateness == _ZERO, lateness=lateness)

    def evaluate_checkout(self, check_out_time: datetime, expected_check_out: datetime) -> CheckOutEvaluation:
        early_by = max(_ZERO, expected_check_out - check_out_time)
        return CheckOutEvaluation(early=early_by > _ZERO, early_by=early_by)

    def deduction(self, duration: timedelta) -> float:
        """``hours * rate``; e.g. 30 minutes at 0.05/hour is 0.025."""
        return duration.total_seconds() / 3600 * self._rate
