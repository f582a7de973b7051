from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ...core.enums import AbsenceType, AttendanceStatus, ViolationType
from ..evaluator import CheckInEvaluation, CheckOutEvaluation


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    violation: Optional[ViolationType] = None
    # Duration the deduction is computed from.
    penalty: timedelta = timedelta(0)
    # Absence that excuses the breach once approved, and the one auto-filed otherwise.
    excused_by: Optional[AbsenceType] = None
    files_absence: Optional[AbsenceType] = None
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_checkin(self, evaluation: CheckInEvaluation) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, evaluation: CheckOutEvaluation, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
