from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import parse_enum, require_non_empty
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import Forbidden, NotFound, ValidationError
from ..core.transaction import NullTransactionManager, TransactionManager
from ..ledger.service import LedgerNotifier
from .access import (
    HR_ROLES,
    PROFILE_FIELDS,
    REQUIRED_PROFILE_FIELDS,
    ROOT_UPDATABLE_FIELDS,
    Action,
    filter_fields,
    require,
)
from .model import Employee, EmployeeFilter
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeChange:
    """Result of a write that may also have notified the ledger."""

    employee: Employee
    ledger_synced: bool = True


class EmployeeService:
    """Use cases: create, update and list employee records."""

    def __init__(
        self,
        employees: EmployeeRepository,
        ledger: LedgerNotifier,
        *,
        tx: Optional[TransactionManager] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._ledger = ledger
        self._tx = tx or NullTransactionManager()
        self._clock = clock

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFound("Employee not found")
        return employee

    def create_employee(
        self,
        *,
        actor_role: Role,
        nickname: str,
        role: Role | str,
        onboard_date: Optional[date] = None,
        wallet_address: str = "",
        salary: float = 0.0,
    ) -> EmployeeChange:
        require(actor_role, Action.CREATE_EMPLOYEE, "Only root can create initial employee records")

        nickname = require_non_empty(nickname, "nickname")
        role = parse_enum(Role, role, "role")
        if role == Role.ROOT:
            raise ValidationError("Cannot create another root account")
        salary = self._coerce_salary(salary)

        with self._tx.transaction():
            if self._employees.get_by_nickname(nickname):
                raise ValidationError("Nickname already exists")
            employee_id = self._employees.create(
                nickname=nickname,
                role=role,
                status=EmployeeStatus.PENDING,
                onboard_date=onboard_date or self._clock().date(),
                salary=salary,
                wallet_address=(wallet_address or "").strip(),
            )
            employee = self.get_employee(employee_id)

        synced = True
        if employee.wallet_address:
            synced = self._ledger.add_employee(wallet_address=employee.wallet_address, salary=employee.salary)
        logger.info("Employee #%s (%s) created with role %s", employee.employee_id, nickname, role.value)
        return EmployeeChange(employee=employee, ledger_synced=synced)

    def update_employee(
        self,
        *,
        actor_id: Optional[int],
        actor_role: Role,
        employee_id: int,
        changes: Mapping[str, Any],
    ) -> EmployeeChange:
        """Apply a patch-style update after the field-level gate.

        Root updates keep only ``salary``; other roles are rejected as a
        whole when they touch a protected field.
        """

        employee = self.get_employee(employee_id)
        allowed = filter_fields(actor_role, changes.keys())

        if actor_role != Role.ROOT:
            if actor_role not in HR_ROLES and actor_id != employee.employee_id:
                raise Forbidden("You can only update your own profile")
            unknown = sorted(allowed - PROFILE_FIELDS)
            if unknown:
                raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

        if employee.status == EmployeeStatus.LEFT_COMPANY:
            raise ValidationError("Employee has left the company")

        values = self._coerce_values({k: changes[k] for k in allowed})
        if "email" in values:
            owner = self._employees.get_by_email(values["email"])
            if owner and owner.employee_id != employee.employee_id:
                raise ValidationError("Email already exists")

        if employee.status == EmployeeStatus.PENDING and self._profile_complete(employee, values):
            values["status"] = EmployeeStatus.ACTIVE

        if not values:
            return EmployeeChange(employee=employee)

        with self._tx.transaction():
            self._employees.update_fields(employee.employee_id, values)
            updated = self.get_employee(employee.employee_id)

        synced = True
        if "salary" in values and updated.wallet_address:
            synced = self._ledger.update_salary(wallet_address=updated.wallet_address, salary=updated.salary)
        if values.get("status") == EmployeeStatus.ACTIVE:
            logger.info("Employee #%s completed profile, now active", updated.employee_id)
        return EmployeeChange(employee=updated, ledger_synced=synced)

    def list_employees(self, *, actor_role: Role, flt: EmployeeFilter) -> Sequence[Employee]:
        require(actor_role, Action.LIST_EMPLOYEES)
        if flt.onboard_from and flt.onboard_to and flt.onboard_to < flt.onboard_from:
            raise ValidationError("onboard_to must be >= onboard_from")
        return self._employees.list(flt)

    @staticmethod
    def _profile_complete(employee: Employee, values: Mapping[str, Any]) -> bool:
        for name in REQUIRED_PROFILE_FIELDS:
            value = values.get(name, getattr(employee, name))
            if value is None or (isinstance(value, str) and not value.strip()):
                return False
        return True

    @staticmethod
    def _coerce_salary(value: Any) -> float:
        try:
            salary = float(value)
        except (TypeError, ValueError):
            raise ValidationError("salary must be a number")
        if not math.isfinite(salary):
            raise ValidationError("salary must be a finite number")
        if salary < 0:
            raise ValidationError("salary must be >= 0")
        return salary

    def _coerce_values(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, value in raw.items():
            if name in ROOT_UPDATABLE_FIELDS:
                values[name] = self._coerce_salary(value)
            elif name == "date_of_birth":
                if value in (None, ""):
                    values[name] = None
                else:
                    try:
                        values[name] = value if isinstance(value, date) else parse_iso_date(str(value))
                    except ValueError:
                        raise ValidationError("Invalid date_of_birth format. Use YYYY-MM-DD")
            elif name == "number_of_dependents":
                try:
                    dependents = int(value)
                except (TypeError, ValueError):
                    raise ValidationError("number_of_dependents must be an integer")
                if dependents < 0:
                    raise ValidationError("number_of_dependents must be >= 0")
                values[name] = dependents
            elif name == "email":
                values[name] = require_non_empty(value, "email").lower()
            else:
                values[name] = "" if value is None else str(value).strip()
        return values
