from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee record.

    Note: Plain data object, no DB access. A record created by root holds
    only ``nickname`` and ``role``; the profile is filled in later.
    """

    employee_id: int
    nickname: str
    role: Role
    status: EmployeeStatus
    full_name: str = ""
    email: Optional[str] = None
    phone_number: str = ""
    address: str = ""
    date_of_birth: Optional[date] = None
    gender: str = ""
    tax_id: str = ""
    health_insurance_id: str = ""
    social_insurance_id: str = ""
    number_of_dependents: int = 0
    position: str = ""
    location: str = ""
    department: str = ""
    wallet_address: str = ""
    salary: float = 0.0
    leave_balance: int = 0
    onboard_date: Optional[date] = None
    password_hash: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "nickname": self.nickname,
            "role": self.role.value,
            "status": self.status.value,
            "full_name": self.full_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "address": self.address,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "gender": self.gender,
            "position": self.position,
            "location": self.location,
            "department": self.department,
            "wallet_address": self.wallet_address,
            "salary": self.salary,
            "leave_balance": self.leave_balance,
            "onboard_date": self.onboard_date.isoformat() if self.onboard_date else None,
        }


@dataclass(frozen=True)
class EmployeeUpdate:
    """Typed partial update: only the keys in ``values`` are written."""

    values: dict[str, Any] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class EmployeeFilter:
    department: Optional[str] = None
    status: Optional[EmployeeStatus] = None
    role: Optional[Role] = None
    onboard_from: Optional[date] = None
    onboard_to: Optional[date] = None
    # Only employees having at least one absence of this type.
    absence_type: Optional[str] = None
