from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.timekeeping.timekeeping.absences.classifier import AbsenceClassifier
from src.timekeeping.timekeeping.absences.service import AbsenceService
from src.timekeeping.timekeeping.attendance.service import AttendanceService
from src.timekeeping.timekeeping.auth.login_code import AuthCodeStore
from src.timekeeping.timekeeping.auth.service import AuthService
from src.timekeeping.timekeeping.container import Container
from src.timekeeping.timekeeping.core.enums import Role
from src.timekeeping.timekeeping.employees.service import EmployeeService
from src.timekeeping.timekeeping.main import create_app
from src.timekeeping.timekeeping.payroll.service import PayrollService
from src.timekeeping.timekeeping.reports.service import ReportService
from src.timekeeping.timekeeping.rules.service import RuleService


@pytest.fixture
def app(monkeypatch, employees, attendance, violations, absences, rules, approvals, outbox, ledger, tx, fixed_now):
    monkeypatch.setenv("APP_ENV", "testing")
    clock = lambda: fixed_now  # noqa: E731

    employees.add(
        employee_id=1,
        nickname="root",
        role=Role.ROOT,
        email="root@test.local",
        password_hash=generate_password_hash("root123"),
    )
    employees.add(employee_id=2, nickname="lan", full_name="Lan Tran", department="Ops", salary=1500)

    codes = AuthCodeStore(clock=clock)
    classifier = AbsenceClassifier(clock=clock)
    rule_service = RuleService(rules, ledger)
    container = Container(
        conn=tx,
        employees_repo=employees,
        attendance_repo=attendance,
        violations_repo=violations,
        absences_repo=absences,
        rules_repo=rules,
        approvals_repo=approvals,
        outbox_repo=outbox,
        login_codes=codes,
        ledger_notifier=ledger,
        auth_service=AuthService(employees, codes),
        employee_service=EmployeeService(employees, ledger, tx=tx, clock=clock),
        rule_service=rule_service,
        attendance_service=AttendanceService(
            attendance, violations, absences, employees, rule_service, classifier=classifier, tx=tx, clock=clock
        ),
        absence_service=AbsenceService(absences, employees, classifier=classifier, tx=tx),
        report_service=ReportService(attendance, employees, absences, clock=clock),
        payroll_service=PayrollService(approvals, employees, violations, ledger, tx=tx, clock=clock),
    )
    return create_app(container=container)


@pytest.fixture
def root_client(app):
    client = app.test_client()
    resp = client.post("/auth/login", json={"email": "ROOT@test.local", "password": "root123"})
    assert resp.status_code == 200
    return client


def test_password_login_and_bad_credentials(app, root_client):
    me = root_client.get("/employees/me").get_json()
    assert me["success"] is True
    assert me["data"]["role"] == "root"

    resp = app.test_client().post("/auth/login", json={"email": "root@test.local", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Invalid email or password"}


def test_code_login_then_check_in_and_out(app, root_client):
    code = root_client.get("/auth/active-code").get_json()["data"]["code"]
    employee = app.test_client()

    login = employee.post("/auth/login-with-code", json={"nickname": "lan", "code": code})
    assert login.status_code == 200
    assert login.get_json()["data"] == {"user_id": 2, "name": "Lan Tran", "role": "employee"}

    reused = app.test_client().post("/auth/login-with-code", json={"nickname": "lan", "code": code})
    assert reused.status_code == 401

    checkin = employee.post("/attendance/check-in")
    assert checkin.status_code == 201
    body = checkin.get_json()
    assert body["message"] == "Checked in successfully"
    assert body["data"]["on_time"] is True

    assert employee.post("/attendance/check-in").status_code == 409
    assert employee.get("/attendance/today").get_json()["data"]["user_id"] == 2

    checkout = employee.post("/attendance/check-out")
    assert checkout.status_code == 200
    assert len(employee.get("/attendance/history").get_json()["data"]) == 1


def test_login_required_and_role_checks(app, root_client):
    anonymous = app.test_client()
    assert anonymous.get("/attendance/today").status_code == 401

    code = root_client.get("/auth/active-code").get_json()["data"]["code"]
    employee = app.test_client()
    employee.post("/auth/login-with-code", json={"nickname": "lan", "code": code})

    resp = employee.post("/employees", json={"nickname": "new", "role": "employee"})
    assert resp.status_code == 403
    assert employee.get("/auth/active-code").status_code == 403


def test_root_creates_employee_and_views_reports(root_client):
    created = root_client.post("/employees", json={"nickname": "minh", "role": "hr", "salary": 1200})
    assert created.status_code == 201
    assert created.get_json()["data"]["status"] == "pending"
    assert created.get_json()["data"]["ledger_synced"] is True

    stats = root_client.get("/reports/employee-stats?time_range=week")
    assert stats.status_code == 200
    assert stats.get_json()["data"]["time_range"] == "week"

    bad = root_client.get("/reports/employee-stats?time_range=decade")
    assert bad.status_code == 400
    assert "Invalid time range" in bad.get_json()["error"]


def test_rules_update_and_salary_flow(root_client):
    rule = root_client.put("/rules/check_in_time", json={"details": "08:30"})
    assert rule.status_code == 200

    processed = root_client.post("/salary/process", json={"user_id": 2, "month": "2026-03", "bonus": 50})
    assert processed.status_code == 201
    approval_id = processed.get_json()["data"]["id"]

    approved = root_client.post(f"/salary/{approval_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "approved"


def test_unknown_route_and_non_object_body(root_client):
    missing = root_client.get("/nope")
    assert missing.status_code == 404
    assert missing.get_json() == {"success": False, "error": "Not found"}

    resp = root_client.patch("/employees/2", json=["salary", 1])
    assert resp.status_code == 400


def test_logout_clears_session(root_client):
    assert root_client.post("/auth/logout").status_code == 200
    assert root_client.get("/employees/me").status_code == 401
