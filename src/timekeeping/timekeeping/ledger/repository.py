from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from .model import OutboxEntry


class OutboxRepository(Protocol):
    def add(self, *, method: str, args: dict[str, Any], error: str, created_at: datetime) -> int:
        raise NotImplementedError

    def list_pending(self, *, limit: int) -> Sequence[OutboxEntry]:
        raise NotImplementedError

    def mark_sent(self, entry_id: int, *, sent_at: datetime) -> bool:
        raise NotImplementedError

    def record_failure(self, entry_id: int, *, error: str) -> bool:
        raise NotImplementedError
