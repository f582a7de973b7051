from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.exceptions import ExternalNotificationError, StorageError
from .client import LedgerClient
from .model import FlushResult
from .repository import OutboxRepository

logger = logging.getLogger(__name__)


class LedgerNotifier:
    """Best-effort ledger notifications.

    Callers commit their local write first and then notify. A failed call
    is written to the outbox and reported as ``False``; it never undoes
    the local change. ``flush_outbox`` retries what is queued.
    """

    def __init__(
        self,
        client: Optional[LedgerClient],
        outbox: OutboxRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._client = client
        self._outbox = outbox
        self._clock = clock

    def add_employee(self, *, wallet_address: str, salary: float) -> bool:
        return self._notify("add_employee", {"wallet_address": wallet_address, "salary": int(salary)})

    def update_salary(self, *, wallet_address: str, salary: float) -> bool:
        return self._notify("update_salary", {"wallet_address": wallet_address, "salary": int(salary)})

    def pay_salary(self, *, employee: str, amount: float, deductions: float, bonus: float) -> bool:
        return self._notify(
            "pay_salary",
            {"employee": employee, "amount": int(amount), "deductions": int(deductions), "bonus": int(bonus)},
        )

    def update_company_rule(self, *, rule_id: str, details: str) -> bool:
        return self._notify("update_company_rule", {"rule_id": rule_id, "details": details})

    def _notify(self, method: str, args: dict[str, Any]) -> bool:
        if self._client is None:
            logger.debug("Ledger disabled, skipping %s", method)
            return True

        try:
            self._client.call(method, args)
            return True
        except ExternalNotificationError as e:
            error = e

        try:
            entry_id = self._outbox.add(method=method, args=args, error=str(error), created_at=self._clock())
        except StorageError as e:
            logger.error("Ledger %s failed (%s) and could not be queued: %s", method, error, e)
            return False
        logger.warning("Ledger %s queued in outbox #%s: %s", method, entry_id, error)
        return False

    def flush_outbox(self, *, limit: int = DEFAULT_LIST_LIMIT) -> FlushResult:
        if self._client is None:
            return FlushResult(sent=0, failed=0)

        sent = 0
        failed = 0
        for entry in self._outbox.list_pending(limit=limit):
            try:
                self._client.call(entry.method, entry.args)
            except ExternalNotificationError as e:
                self._outbox.record_failure(entry.entry_id, error=str(e))
                failed += 1
                continue
            self._outbox.mark_sent(entry.entry_id, sent_at=self._clock())
            sent += 1

        if sent or failed:
            logger.info("Ledger outbox flush: sent=%s failed=%s", sent, failed)
        return FlushResult(sent=sent, failed=failed)
