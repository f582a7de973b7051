from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceReportRow


class WorkTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def lateness_seconds(self, row: AttendanceReportRow) -> int:
        raise NotImplementedError

    @abstractmethod
    def effective_seconds(self, row: AttendanceReportRow) -> int:
        raise NotImplementedError
