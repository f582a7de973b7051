from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.core.enums import Role
from src.timekeeping.timekeeping.core.exceptions import ConfigurationError, Forbidden, ValidationError
from src.timekeeping.timekeeping.rules.service import RuleService


def test_expected_time_combines_rule_with_date(rules, ledger):
    service = RuleService(rules, ledger)

    assert service.expected_time("check_in_time", date(2026, 3, 2)) == datetime(2026, 3, 2, 9, 0)
    assert service.optional_expected_time("check_out_time", date(2026, 3, 2)) == datetime(2026, 3, 2, 18, 0)


def test_missing_rule(make_rules, ledger):
    service = RuleService(make_rules(), ledger)

    assert service.optional_expected_time("check_out_time", date(2026, 3, 2)) is None
    with pytest.raises(ConfigurationError, match="not configured"):
        service.expected_time("check_in_time", date(2026, 3, 2))


def test_malformed_rule_is_configuration_error(make_rules, ledger):
    service = RuleService(make_rules({"check_in_time": "nine o'clock"}), ledger)

    with pytest.raises(ConfigurationError, match="Invalid check_in_time rule"):
        service.expected_time("check_in_time", date(2026, 3, 2))


def test_root_updates_rule_and_notifies_ledger(rules, ledger, ledger_client):
    service = RuleService(rules, ledger)

    change = service.update_rule(actor_id=1, actor_role=Role.ROOT, rule_name="check_in_time", details=" 08:30 ")

    assert change.rule.details == "08:30"
    assert change.rule.created_by == 1
    assert change.ledger_synced is True
    assert ledger_client.calls == [("update_company_rule", {"rule_id": "check_in_time", "details": "08:30"})]
    assert service.expected_time("check_in_time", date(2026, 3, 2)) == datetime(2026, 3, 2, 8, 30)


def test_update_rule_with_ledger_down_is_kept_locally(rules, failing_ledger, outbox):
    service = RuleService(rules, failing_ledger)

    change = service.update_rule(actor_id=1, actor_role=Role.ROOT, rule_name="check_out_time", details="17:30")

    assert change.ledger_synced is False
    assert rules.get("check_out_time").details == "17:30"
    assert len(outbox.entries) == 1


@pytest.mark.parametrize(
    "rule_name, details, message",
    [
        ("lunch_break", "12:00", "Unknown rule"),
        ("check_in_time", "25:00", "HH:MM"),
        ("check_in_time", "", "HH:MM"),
    ],
)
def test_update_rule_validation(rules, ledger, rule_name, details, message):
    with pytest.raises(ValidationError, match=message):
        RuleService(rules, ledger).update_rule(actor_id=1, actor_role=Role.ROOT, rule_name=rule_name, details=details)


def test_only_root_updates_rules(rules, ledger):
    with pytest.raises(Forbidden):
        RuleService(rules, ledger).update_rule(
            actor_id=2, actor_role=Role.HR_MANAGER, rule_name="check_in_time", details="08:00"
        )


def test_list_rules_sorted_by_name(rules, ledger):
    assert [r.rule_name for r in RuleService(rules, ledger).list_rules()] == ["check_in_time", "check_out_time"]
