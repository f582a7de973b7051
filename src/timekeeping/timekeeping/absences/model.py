from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus, AbsenceType


@dataclass(frozen=True)
class Absence:
    """Domain entity: a deviation from expected attendance.

    ``processed_by``/``processed_at`` are set exactly when the status is
    approved or rejected.
    """

    employee_id: int
    absence_date: date
    type: AbsenceType
    reason: str
    status: AbsenceStatus = AbsenceStatus.PENDING
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    absence_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.absence_id,
            "user_id": self.employee_id,
            "date": self.absence_date.isoformat(),
            "type": self.type.value,
            "reason": self.reason,
            "status": self.status.value,
            "processed_by": self.processed_by,
            "processed_at": self.processed_at.isoformat() if self.processed_at else None,
        }


@dataclass(frozen=True)
class AbsenceFilter:
    """Absent fields mean "no constraint"."""

    type: Optional[AbsenceType] = None
    status: Optional[AbsenceStatus] = None
    department: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    employee_id: Optional[int] = None


@dataclass(frozen=True)
class AbsenceView:
    """Read-model for listings (joined with the employee and processor)."""

    absence: Absence
    full_name: str
    department: str
    processor_name: Optional[str] = None

    def to_dict(self) -> dict:
        a = self.absence
        return {
            "id": a.absence_id,
            "user_id": a.employee_id,
            "full_name": self.full_name,
            "department": self.department,
            "date": a.absence_date.isoformat(),
            "type": a.type.value,
            "reason": a.reason,
            "status": a.status.value,
            "processed_by": self.processor_name,
            "processed_at": a.processed_at.isoformat() if a.processed_at else None,
        }
