from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.timekeeping.timekeeping.auth.login_code import AuthCodeStore
from src.timekeeping.timekeeping.auth.service import AuthService
from src.timekeeping.timekeeping.core.enums import EmployeeStatus, Role
from src.timekeeping.timekeeping.core.exceptions import AuthenticationError, Forbidden, NotFound, ValidationError


@pytest.fixture
def codes():
    return AuthCodeStore(generator=iter(["first123", "second45", "third678"]).__next__)


@pytest.fixture
def service(employees, codes):
    employees.add(
        employee_id=1,
        nickname="root",
        role=Role.ROOT,
        email="root@example.com",
        password_hash=generate_password_hash("rootpass"),
    )
    employees.add(employee_id=2, nickname="mai", role=Role.HR, full_name="Mai Pham")
    employees.add(employee_id=3, nickname="quit", status=EmployeeStatus.LEFT_COMPANY)
    return AuthService(employees, codes)


def test_password_login_returns_own_role(service):
    user = service.authenticate(" Root@Example.com ", "rootpass")

    assert user.user_id == 1
    assert user.role == Role.ROOT
    assert user.name == "root"


@pytest.mark.parametrize(
    "email, password",
    [("root@example.com", "nope"), ("ghost@example.com", "rootpass"), ("", "")],
)
def test_password_login_failures_share_one_message(service, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        service.authenticate(email, password)


def test_account_without_password_cannot_use_password_login(service, employees):
    employees.update_fields(2, {"email": "mai@example.com"})

    with pytest.raises(AuthenticationError):
        service.authenticate("mai@example.com", "")


def test_code_login_gives_employee_session_and_rotates(service, codes):
    code = service.active_code(actor_role=Role.ROOT).code

    user = service.login_with_code("mai", code)

    assert user.user_id == 2
    assert user.name == "Mai Pham"
    assert user.role == Role.EMPLOYEE
    assert codes.current().code == "second45"
    with pytest.raises(AuthenticationError, match="Invalid login code"):
        service.login_with_code("mai", code)


def test_unknown_nickname_does_not_consume_code(service, codes):
    code = service.active_code(actor_role=Role.ROOT).code

    with pytest.raises(AuthenticationError):
        service.login_with_code("nobody", code)
    with pytest.raises(AuthenticationError):
        service.login_with_code("quit", code)

    assert codes.current().code == code


def test_only_root_sees_active_code(service):
    with pytest.raises(Forbidden):
        service.active_code(actor_role=Role.HR_MANAGER)


def test_set_password_enables_password_login(service, employees):
    employees.update_fields(2, {"email": "mai@example.com"})

    service.set_password(employee_id=2, password="s3cret!")

    assert service.authenticate("mai@example.com", "s3cret!").role == Role.HR


def test_set_password_rules(service):
    with pytest.raises(ValidationError, match="at least 6"):
        service.set_password(employee_id=2, password="abc")
    with pytest.raises(NotFound):
        service.set_password(employee_id=99, password="longenough")
