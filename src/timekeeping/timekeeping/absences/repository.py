from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceType
from .model import Absence, AbsenceFilter, AbsenceView


class AbsenceRepository(Protocol):
    def create(self, absence: Absence) -> int:
        raise NotImplementedError

    def get(self, absence_id: int) -> Optional[Absence]:
        raise NotImplementedError

    def find_for_date(self, *, employee_id: int, absence_date: date, type: AbsenceType) -> Optional[Absence]:
        """Most recent absence of ``type`` for the employee on that date."""

        raise NotImplementedError

    def save_status(self, absence: Absence) -> bool:
        """Persist status, processed_by and processed_at of an existing absence."""

        raise NotImplementedError

    def list(self, flt: AbsenceFilter) -> Sequence[AbsenceView]:
        """Filtered listing in insertion order."""

        raise NotImplementedError
