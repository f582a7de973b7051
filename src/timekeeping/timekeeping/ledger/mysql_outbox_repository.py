from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Sequence

from ..core.enums import OutboxStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import OutboxEntry
from .repository import OutboxRepository


class MySQLOutboxRepository(OutboxRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, method: str, args: dict[str, Any], error: str, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ledger_outbox(method, args, status, attempts, last_error, created_at)
                VALUES(%s,%s,%s,1,%s,%s)
                """,
                (method, json.dumps(args, sort_keys=True), OutboxStatus.PENDING.value, error, created_at),
            )
            return int(cur.lastrowid)

    def list_pending(self, *, limit: int) -> Sequence[OutboxEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, method, args, status, attempts, last_error, created_at, sent_at
                FROM ledger_outbox
                WHERE status=%s
                ORDER BY entry_id ASC
                LIMIT %s
                """,
                (OutboxStatus.PENDING.value, int(limit)),
            )
            return [
                OutboxEntry(
                    entry_id=int(r["entry_id"]),
                    method=r["method"],
                    args=json.loads(r["args"] or "{}"),
                    status=OutboxStatus(r["status"]),
                    attempts=int(r["attempts"]),
                    created_at=r["created_at"],
                    last_error=r.get("last_error"),
                    sent_at=r.get("sent_at"),
                )
                for r in fetchall(cur)
            ]

    def mark_sent(self, entry_id: int, *, sent_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ledger_outbox SET status=%s, sent_at=%s WHERE entry_id=%s",
                (OutboxStatus.SENT.value, sent_at, int(entry_id)),
            )
            return cur.rowcount > 0

    def record_failure(self, entry_id: int, *, error: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ledger_outbox SET attempts=attempts+1, last_error=%s WHERE entry_id=%s",
                (error, int(entry_id)),
            )
            return cur.rowcount > 0
