from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection, optional_int
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CompanyRule
from .repository import RuleRepository


def _row_to_rule(r: dict) -> CompanyRule:
    return CompanyRule(
        rule_name=r["rule_name"],
        details=r["details"],
        created_by=optional_int(r.get("created_by")),
        updated_at=r.get("updated_at"),
    )


class MySQLRuleRepository(RuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, rule_name: str) -> Optional[CompanyRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT rule_name, details, created_by, updated_at FROM company_rules WHERE rule_name=%s",
                (rule_name,),
            )
            row = fetchone(cur)
            return _row_to_rule(row) if row else None

    def list_all(self) -> Sequence[CompanyRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT rule_name, details, created_by, updated_at FROM company_rules ORDER BY rule_name")
            return [_row_to_rule(r) for r in fetchall(cur)]

    def upsert(self, *, rule_name: str, details: str, created_by: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO company_rules(rule_name, details, created_by)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE details=VALUES(details), created_by=VALUES(created_by),
                                        updated_at=CURRENT_TIMESTAMP
                """,
                (rule_name, details, int(created_by)),
            )
