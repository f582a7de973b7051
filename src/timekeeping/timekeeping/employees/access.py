"""Field-level authorization for employee records.

Everything here is a pure function of (role, action) or (role, fields).
The tables are explicit so the rules can be read at a glance.
"""

from __future__ import annotations

from enum import Enum
from typing import AbstractSet, FrozenSet, Iterable

from ..core.enums import Role
from ..core.exceptions import Forbidden


class Action(str, Enum):
    CREATE_EMPLOYEE = "create_employee"
    LIST_EMPLOYEES = "list_employees"
    UPDATE_SALARY = "update_salary"
    UPDATE_ROLE = "update_role"
    UPDATE_NICKNAME = "update_nickname"
    UPDATE_DEPARTMENT = "update_department"
    UPDATE_PROFILE = "update_profile"
    VIEW_ABSENCES = "view_absences"
    PROCESS_ABSENCE = "process_absence"
    MANAGE_RULES = "manage_rules"
    VIEW_LOGIN_CODE = "view_login_code"
    VIEW_REPORTS = "view_reports"
    PROCESS_SALARY = "process_salary"
    APPROVE_SALARY = "approve_salary"
    FLUSH_LEDGER = "flush_ledger"


ALL_ROLES: FrozenSet[Role] = frozenset(Role)
HR_ROLES: FrozenSet[Role] = frozenset({Role.ROOT, Role.HR, Role.HR_MANAGER})
NON_ROOT_ROLES: FrozenSet[Role] = ALL_ROLES - {Role.ROOT}

ACTION_ROLES: dict[Action, FrozenSet[Role]] = {
    Action.CREATE_EMPLOYEE: frozenset({Role.ROOT}),
    Action.LIST_EMPLOYEES: HR_ROLES | {Role.ACCOUNTANT},
    Action.UPDATE_SALARY: frozenset({Role.ROOT}),
    # Nobody may rename or re-role an employee through an update.
    Action.UPDATE_ROLE: frozenset(),
    Action.UPDATE_NICKNAME: frozenset(),
    Action.UPDATE_DEPARTMENT: NON_ROOT_ROLES,
    Action.UPDATE_PROFILE: NON_ROOT_ROLES,
    Action.VIEW_ABSENCES: HR_ROLES,
    Action.PROCESS_ABSENCE: HR_ROLES,
    Action.MANAGE_RULES: frozenset({Role.ROOT}),
    Action.VIEW_LOGIN_CODE: frozenset({Role.ROOT}),
    Action.VIEW_REPORTS: HR_ROLES,
    Action.PROCESS_SALARY: frozenset({Role.ROOT, Role.ACCOUNTANT}),
    Action.APPROVE_SALARY: frozenset({Role.ROOT}),
    Action.FLUSH_LEDGER: frozenset({Role.ROOT}),
}

PROTECTED_FIELDS: FrozenSet[str] = frozenset({"nickname", "role", "salary"})
ROOT_UPDATABLE_FIELDS: FrozenSet[str] = frozenset({"salary"})

PROFILE_FIELDS: FrozenSet[str] = frozenset(
    {
        "full_name",
        "email",
        "phone_number",
        "address",
        "date_of_birth",
        "gender",
        "tax_id",
        "health_insurance_id",
        "social_insurance_id",
        "number_of_dependents",
        "position",
        "location",
        "department",
        "wallet_address",
    }
)

# A pending employee becomes active once all of these are filled in.
REQUIRED_PROFILE_FIELDS: tuple[str, ...] = (
    "full_name",
    "email",
    "phone_number",
    "address",
    "position",
    "department",
    "location",
)

_FIELD_ACTIONS = {
    "salary": Action.UPDATE_SALARY,
    "role": Action.UPDATE_ROLE,
    "nickname": Action.UPDATE_NICKNAME,
    "department": Action.UPDATE_DEPARTMENT,
}


def field_action(field_name: str) -> Action:
    return _FIELD_ACTIONS.get(field_name, Action.UPDATE_PROFILE)


def authorize(role: Role, action: Action) -> bool:
    return role in ACTION_ROLES.get(action, frozenset())


def require(role: Role, action: Action, message: str = "You do not have permission") -> None:
    if not authorize(role, action):
        raise Forbidden(message)


def filter_fields(role: Role, requested: Iterable[str]) -> FrozenSet[str]:
    """Return the subset of ``requested`` that ``role`` may write.

    Root may only adjust salary; anything else it sends is dropped.
    Any other role sending a protected field gets the whole update rejected.
    """

    requested_set: AbstractSet[str] = frozenset(requested)
    if role == Role.ROOT:
        return frozenset(requested_set & ROOT_UPDATABLE_FIELDS)

    blocked = sorted(requested_set & PROTECTED_FIELDS)
    if blocked:
        raise Forbidden(f"Cannot update protected fields: {', '.join(blocked)}")
    return frozenset(requested_set)
