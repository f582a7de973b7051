from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.classifier import AbsenceClassifier
from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.service import AbsenceService
from .attendance.evaluator import AttendanceEvaluator
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLViolationRepository
from .attendance.service import AttendanceService
from .auth.login_code import AuthCodeStore
from .auth.service import AuthService
from .core.constants import (
    DEFAULT_DEDUCTION_RATE,
    DEFAULT_LEDGER_ENDPOINT,
    DEFAULT_LEDGER_TIMEOUT_SECONDS,
    DEFAULT_TOP_N,
)
from .database.connection import DatabaseConnection, config_from_dict
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .ledger.client import LedgerClient
from .ledger.mysql_outbox_repository import MySQLOutboxRepository
from .ledger.service import LedgerNotifier
from .payroll.mysql_salary_repository import MySQLSalaryApprovalRepository
from .payroll.service import PayrollService
from .reports.aggregator import StatsAggregator
from .reports.service import ReportService
from .rules.mysql_rule_repository import MySQLRuleRepository
from .rules.service import RuleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    violations_repo: MySQLViolationRepository
    absences_repo: MySQLAbsenceRepository
    rules_repo: MySQLRuleRepository
    approvals_repo: MySQLSalaryApprovalRepository
    outbox_repo: MySQLOutboxRepository

    login_codes: AuthCodeStore
    ledger_notifier: LedgerNotifier

    auth_service: AuthService
    employee_service: EmployeeService
    rule_service: RuleService
    attendance_service: AttendanceService
    absence_service: AbsenceService
    report_service: ReportService
    payroll_service: PayrollService


def build_container(
    *,
    db_config: dict,
    deduction_rate: float = DEFAULT_DEDUCTION_RATE,
    ledger_canister_id: str = "",
    ledger_endpoint: str = DEFAULT_LEDGER_ENDPOINT,
    ledger_timeout: float = DEFAULT_LEDGER_TIMEOUT_SECONDS,
    top_n: int = DEFAULT_TOP_N,
    login_codes: Optional[AuthCodeStore] = None,
) -> Container:
    conn = DatabaseConnection(config_from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    violations_repo = MySQLViolationRepository(conn)
    absences_repo = MySQLAbsenceRepository(conn)
    rules_repo = MySQLRuleRepository(conn)
    approvals_repo = MySQLSalaryApprovalRepository(conn)
    outbox_repo = MySQLOutboxRepository(conn)

    login_codes = login_codes or AuthCodeStore()
    ledger_client = None
    if ledger_canister_id:
        ledger_client = LedgerClient(ledger_canister_id, endpoint=ledger_endpoint, timeout=ledger_timeout)
    ledger_notifier = LedgerNotifier(ledger_client, outbox_repo)

    classifier = AbsenceClassifier()
    rule_service = RuleService(rules_repo, ledger_notifier)

    auth_service = AuthService(employees_repo, login_codes)
    employee_service = EmployeeService(employees_repo, ledger_notifier, tx=conn)
    attendance_service = AttendanceService(
        attendance_repo,
        violations_repo,
        absences_repo,
        employees_repo,
        rule_service,
        evaluator=AttendanceEvaluator(rate=deduction_rate),
        strategy_factory=AttendanceStrategyFactory(),
        classifier=classifier,
        tx=conn,
    )
    absence_service = AbsenceService(absences_repo, employees_repo, classifier=classifier, tx=conn)
    report_service = ReportService(
        attendance_repo,
        employees_repo,
        absences_repo,
        aggregator=StatsAggregator(top_n=top_n),
    )
    payroll_service = PayrollService(approvals_repo, employees_repo, violations_repo, ledger_notifier, tx=conn)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        violations_repo=violations_repo,
        absences_repo=absences_repo,
        rules_repo=rules_repo,
        approvals_repo=approvals_repo,
        outbox_repo=outbox_repo,
        login_codes=login_codes,
        ledger_notifier=ledger_notifier,
        auth_service=auth_service,
        employee_service=employee_service,
        rule_service=rule_service,
        attendance_service=attendance_service,
        absence_service=absence_service,
        report_service=report_service,
        payroll_service=payroll_service,
    )
