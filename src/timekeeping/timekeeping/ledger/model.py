from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import OutboxStatus


@dataclass(frozen=True)
class OutboxEntry:
    """A ledger call that failed and waits to be retried."""

    entry_id: int
    method: str
    args: dict[str, Any]
    status: OutboxStatus
    attempts: int
    created_at: datetime
    last_error: Optional[str] = None
    sent_at: Optional[datetime] = None


@dataclass(frozen=True)
class FlushResult:
    sent: int
    failed: int
