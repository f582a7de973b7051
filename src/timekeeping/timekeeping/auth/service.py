from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthenticationError, NotFound
from ..employees.access import Action, require
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .login_code import AuthCodeStore, LoginCode

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    role: Role


class AuthService:
    """Use case: password login, login-code login and the root code view."""

    def __init__(self, employees: EmployeeRepository, codes: AuthCodeStore):
        self._employees = employees
        self._codes = codes

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        employee = self._employees.get_by_email(email) if email else None
        if not employee or not employee.password_hash or employee.status == EmployeeStatus.LEFT_COMPANY:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # unknown hash method stored in the row
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("Employee #%s logged in with password", employee.employee_id)
        return self._session_user(employee, employee.role)

    def login_with_code(self, nickname: str, code: str) -> SessionUser:
        """Employee login with the shared code; the code rotates on success."""
        employee = self._employees.get_by_nickname((nickname or "").strip())
        if not employee or employee.status == EmployeeStatus.LEFT_COMPANY:
            raise AuthenticationError("Invalid login code")
        if not self._codes.validate(code):
            raise AuthenticationError("Invalid login code")

        logger.info("Employee #%s logged in with code", employee.employee_id)
        return self._session_user(employee, Role.EMPLOYEE)

    def active_code(self, *, actor_role: Role) -> LoginCode:
        require(actor_role, Action.VIEW_LOGIN_CODE, "Only root can view active code")
        return self._codes.current_or_issue()

    def set_password(self, *, employee_id: int, password: str) -> None:
        require_min_length(require_non_empty(password, "password"), "password", MIN_PASSWORD_LENGTH)
        if not self._employees.update_fields(int(employee_id), {"password_hash": generate_password_hash(password)}):
            raise NotFound("Employee not found")

    @staticmethod
    def _session_user(employee: Employee, role: Role) -> SessionUser:
        return SessionUser(
            user_id=employee.employee_id,
            name=employee.full_name or employee.nickname,
            role=role,
        )
