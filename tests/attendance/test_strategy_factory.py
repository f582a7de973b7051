from datetime import datetime, timedelta

from src.timekeeping.timekeeping.attendance.evaluator import AttendanceEvaluator
from src.timekeeping.timekeeping.attendance.factory import AttendanceStrategyFactory
from src.timekeeping.timekeeping.attendance.strategies.early_strategy import EarlyLeaveStrategy
from src.timekeeping.timekeeping.attendance.strategies.late_strategy import LateStrategy
from src.timekeeping.timekeeping.attendance.strategies.normal_strategy import NormalStrategy
from src.timekeeping.timekeeping.core.enums import AbsenceType, AttendanceStatus, ViolationType


def test_factory_checkin_exactly_on_cutoff_is_normal():
    evaluation = AttendanceEvaluator().evaluate(datetime(2026, 3, 2, 9, 0, 0), datetime(2026, 3, 2, 9, 0, 0))

    strategy = AttendanceStrategyFactory().for_checkin(evaluation)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_checkin(evaluation).status == AttendanceStatus.ON_TIME


def test_factory_checkin_one_second_late_is_late():
    evaluation = AttendanceEvaluator().evaluate(datetime(2026, 3, 2, 9, 0, 1), datetime(2026, 3, 2, 9, 0, 0))

    strategy = AttendanceStrategyFactory().for_checkin(evaluation)
    decision = strategy.decide_checkin(evaluation)

    assert isinstance(strategy, LateStrategy)
    assert decision.status == AttendanceStatus.LATE
    assert decision.violation == ViolationType.LATE_ARRIVAL
    assert decision.penalty == timedelta(seconds=1)
    assert decision.excused_by == AbsenceType.LATE_WITH_PERMISSION
    assert decision.files_absence == AbsenceType.LATE_WITHOUT_PERMISSION


def test_factory_checkout_early_after_late_checkin_keeps_both_flags():
    evaluation = AttendanceEvaluator().evaluate_checkout(datetime(2026, 3, 2, 17, 0), datetime(2026, 3, 2, 18, 0))

    strategy = AttendanceStrategyFactory().for_checkout(evaluation)
    decision = strategy.decide_checkout(evaluation, AttendanceStatus.LATE)

    assert isinstance(strategy, EarlyLeaveStrategy)
    assert decision.status == AttendanceStatus.LATE_AND_EARLY_LEAVE
    assert decision.violation == ViolationType.EARLY_LEAVE
    assert decision.penalty == timedelta(hours=1)
    assert decision.note == "Early check-out (60 min)"


def test_factory_checkout_after_cutoff_keeps_checkin_status():
    evaluation = AttendanceEvaluator().evaluate_checkout(datetime(2026, 3, 2, 18, 30), datetime(2026, 3, 2, 18, 0))

    strategy = AttendanceStrategyFactory().for_checkout(evaluation)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_checkout(evaluation, AttendanceStatus.LATE).violation is None
    assert strategy.decide_checkout(evaluation, AttendanceStatus.LATE).status == AttendanceStatus.LATE


def test_early_leave_strategy_is_neutral_on_check_in():
    evaluation = AttendanceEvaluator().evaluate(datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 2, 9, 0))

    decision = EarlyLeaveStrategy().decide_checkin(evaluation)

    assert decision.status == AttendanceStatus.ON_TIME
    assert decision.violation is None
