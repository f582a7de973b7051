from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..core.constants import DEFAULT_LEDGER_ENDPOINT, DEFAULT_LEDGER_TIMEOUT_SECONDS
from ..core.exceptions import ExternalNotificationError

logger = logging.getLogger(__name__)


class LedgerClient:
    """HTTP client for the on-chain company registry canister.

    Every call is a JSON ``{"method": ..., "args": {...}}`` POST; anything
    but HTTP 200 is a failure.
    """

    def __init__(
        self,
        canister_id: str,
        *,
        endpoint: str = DEFAULT_LEDGER_ENDPOINT,
        timeout: float = DEFAULT_LEDGER_TIMEOUT_SECONDS,
        http_client: Optional[httpx.Client] = None,
    ):
        self._canister_id = canister_id
        self._endpoint = endpoint.rstrip("/")
        self._client = http_client or httpx.Client(timeout=timeout)

    @property
    def call_url(self) -> str:
        return f"{self._endpoint}/api/v2/canister/{self._canister_id}/call"

    def call(self, method: str, args: dict[str, Any]) -> None:
        payload = {"method": method, "args": args}
        try:
            resp = self._client.post(self.call_url, json=payload, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            logger.warning("Ledger call %s failed: %s", method, e)
            raise ExternalNotificationError(f"Ledger call {method} failed: {e}") from e

        if resp.status_code != 200:
            logger.warning("Ledger call %s returned HTTP %s", method, resp.status_code)
            raise ExternalNotificationError(f"Ledger call {method} failed with status: {resp.status_code}")

    def close(self) -> None:
        self._client.close()
