from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..core.constants import CHECK_IN_RULE, CHECK_OUT_RULE
from ..core.enums import Role
from ..core.exceptions import ConfigurationError, ValidationError
from ..employees.access import Action, require
from ..ledger.service import LedgerNotifier
from .model import CompanyRule
from .repository import RuleRepository

logger = logging.getLogger(__name__)

TIME_RULES = frozenset({CHECK_IN_RULE, CHECK_OUT_RULE})


@dataclass(frozen=True)
class RuleChange:
    rule: CompanyRule
    ledger_synced: bool = True


class RuleService:
    """Company rules: the HH:MM check-in/check-out cutoffs."""

    def __init__(self, rules: RuleRepository, ledger: LedgerNotifier):
        self._rules = rules
        self._ledger = ledger

    def expected_time(self, rule_name: str, on_date: date) -> datetime:
        """Resolve a time-of-day rule against ``on_date``.

        Raises ConfigurationError when the rule is missing or not HH:MM.
        """
        rule = self._rules.get(rule_name)
        if not rule:
            logger.error("Company rule %s is not configured", rule_name)
            raise ConfigurationError(f"Company rule {rule_name} is not configured")
        try:
            cutoff = parse_hhmm(rule.details)
        except ValueError:
            logger.error("Company rule %s has invalid value %r", rule_name, rule.details)
            raise ConfigurationError(f"Invalid {rule_name} rule")
        return datetime.combine(on_date, cutoff)

    def optional_expected_time(self, rule_name: str, on_date: date) -> Optional[datetime]:
        """Like expected_time, but a missing rule yields None."""
        if not self._rules.get(rule_name):
            return None
        return self.expected_time(rule_name, on_date)

    def list_rules(self) -> Sequence[CompanyRule]:
        return self._rules.list_all()

    def update_rule(self, *, actor_id: int, actor_role: Role, rule_name: str, details: str) -> RuleChange:
        require(actor_role, Action.MANAGE_RULES, "Only root can change company rules")

        rule_name = (rule_name or "").strip()
        details = (details or "").strip()
        if rule_name not in TIME_RULES:
            raise ValidationError(f"Unknown rule: {rule_name}")
        try:
            parse_hhmm(details)
        except ValueError:
            raise ValidationError("Rule value must be HH:MM")

        self._rules.upsert(rule_name=rule_name, details=details, created_by=int(actor_id))
        rule = self._rules.get(rule_name) or CompanyRule(rule_name=rule_name, details=details, created_by=int(actor_id))
        synced = self._ledger.update_company_rule(rule_id=rule_name, details=details)
        logger.info("Company rule %s set to %s by #%s", rule_name, details, actor_id)
        return RuleChange(rule=rule, ledger_synced=synced)
