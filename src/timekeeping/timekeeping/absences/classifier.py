from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import parse_enum, require_non_empty
from ..core.enums import AbsenceStatus, AbsenceType
from ..core.exceptions import ValidationError
from .model import Absence

PROCESSED_STATUSES = frozenset({AbsenceStatus.APPROVED, AbsenceStatus.REJECTED})

WITH_PERMISSION_TYPES = frozenset(
    {
        AbsenceType.WITH_PERMISSION,
        AbsenceType.LATE_WITH_PERMISSION,
        AbsenceType.LEAVE_WITH_PERMISSION,
    }
)

# without-permission type -> the type that excuses it once approved
PERMISSION_COUNTERPART = {
    AbsenceType.WITHOUT_PERMISSION: AbsenceType.WITH_PERMISSION,
    AbsenceType.LATE_WITHOUT_PERMISSION: AbsenceType.LATE_WITH_PERMISSION,
    AbsenceType.LEAVE_WITHOUT_PERMISSION: AbsenceType.LEAVE_WITH_PERMISSION,
}


class AbsenceClassifier:
    """Creation and status-transition rules for absences.

    Pure apart from the clock used to stamp ``processed_at``.
    """

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._clock = clock

    def create(
        self,
        *,
        employee_id: Optional[int],
        absence_date: Optional[date],
        type: AbsenceType | str | None,
        reason: Optional[str],
    ) -> Absence:
        if not employee_id:
            raise ValidationError("user_id is required")
        if type is None or (isinstance(type, str) and not type.strip()):
            raise ValidationError("type is required")
        absence_type = parse_enum(AbsenceType, type, "type")
        reason = require_non_empty(reason, "reason")
        if absence_date is None:
            raise ValidationError("date is required")

        return Absence(
            employee_id=int(employee_id),
            absence_date=absence_date,
            type=absence_type,
            reason=reason,
            status=AbsenceStatus.PENDING,
        )

    def transition(
        self,
        absence: Absence,
        new_status: AbsenceStatus | str,
        processor: Optional[int],
        *,
        processed_at: Optional[datetime] = None,
    ) -> Absence:
        """Move ``absence`` to ``new_status``.

        Approving/rejecting needs a processor and happens once; repeating
        the same decision by the same processor returns the record as is.
        Moving back to pending clears the processor fields.
        """

        new_status = parse_enum(AbsenceStatus, new_status, "status")

        if new_status == AbsenceStatus.PENDING:
            return replace(absence, status=AbsenceStatus.PENDING, processed_by=None, processed_at=None)

        if not processor:
            raise ValidationError("processed_by is required for approved/rejected absences")

        if absence.status in PROCESSED_STATUSES:
            if absence.status == new_status and absence.processed_by == int(processor):
                return absence
            raise ValidationError("Absence has already been processed")

        return replace(
            absence,
            status=new_status,
            processed_by=int(processor),
            processed_at=processed_at or self._clock(),
        )

    @staticmethod
    def check_invariants(absence: Absence) -> None:
        """Reject a record whose processor fields disagree with its status."""
        processed = absence.processed_by is not None and absence.processed_at is not None
        unprocessed = absence.processed_by is None and absence.processed_at is None
        if absence.status in PROCESSED_STATUSES and not processed:
            raise ValidationError("processed_by and processed_at are required for approved/rejected absences")
        if absence.status == AbsenceStatus.PENDING and not unprocessed:
            raise ValidationError("Pending absences cannot have a processor")

    @staticmethod
    def is_with_permission(absence_type: AbsenceType) -> bool:
        return absence_type in WITH_PERMISSION_TYPES

    @staticmethod
    def excuses(absence: Absence) -> bool:
        """An approved with-permission absence excuses the matching breach."""
        return absence.status == AbsenceStatus.APPROVED and absence.type in WITH_PERMISSION_TYPES
