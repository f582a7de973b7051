from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, Role
from .model import Employee, EmployeeFilter


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_nickname(self, nickname: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        nickname: str,
        role: Role,
        status: EmployeeStatus,
        onboard_date: date,
        salary: float = 0.0,
        wallet_address: str = "",
    ) -> int:
        raise NotImplementedError

    def update_fields(self, employee_id: int, values: dict[str, Any]) -> bool:
        raise NotImplementedError

    def list(self, flt: EmployeeFilter) -> Sequence[Employee]:
        raise NotImplementedError

    def count_by_status(self, status: EmployeeStatus) -> int:
        raise NotImplementedError
