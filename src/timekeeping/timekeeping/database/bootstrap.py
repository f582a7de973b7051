"""Schema and seed helpers used by ``scripts/`` and by app startup.

These run outside the request path with their own short-lived
connections; failures surface as StorageError.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.exceptions import StorageError
from .connection import DBConfig, config_from_dict

logger = logging.getLogger(__name__)

ROOT_NICKNAME = "root"

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


def _target(db_config: dict) -> DBConfig:
    merged = {"host": "localhost", "user": "root", "password": "", "database": "timekeeping_db"}
    merged.update({k: v for k, v in db_config.items() if v is not None})
    return config_from_dict(merged)


@contextmanager
def _connect(target: DBConfig, *, with_database: bool = True) -> Iterator:
    params = {"host": target.host, "port": target.port, "user": target.user, "password": target.password}
    if with_database:
        params["database"] = target.database
    try:
        conn = mysql.connector.connect(use_pure=True, **params)
    except mysql.connector.Error as e:
        logger.error("Bootstrap could not connect to %s@%s: %s", target.user, target.host, e)
        raise StorageError("Database unavailable") from e

    try:
        yield conn
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Bootstrap statement failed on %s: %s", target.database, e)
        raise StorageError(str(e)) from e
    finally:
        conn.close()


def strip_database_statements(sql: str) -> str:
    """Drop ``CREATE DATABASE`` / ``USE`` so the configured database wins."""
    return _CREATE_DB_OR_USE.sub("", sql)


def split_statements(sql: str) -> list[str]:
    """Split a script on ``;`` outside quotes, skipping ``--`` comment lines."""
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    statements: list[str] = []
    current: list[str] = []
    quote = ""
    escaped = False

    for ch in "\n".join(lines):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
            current = []
            continue
        current.append(ch)

    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


def _run_script(db_config: dict, path: str | Path) -> int:
    statements = split_statements(strip_database_statements(Path(path).read_text(encoding="utf-8")))
    with _connect(_target(db_config)) as conn:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
    return len(statements)


def ensure_database_exists(db_config: dict) -> None:
    target = _target(db_config)
    with _connect(target, with_database=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied %s schema statements from %s", count, Path(schema_path).name)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied %s seed statements from %s", count, Path(seed_path).name)


def ensure_root_account(db_config: dict, *, email: str, password: str) -> None:
    """Create the root account, or reset its email and password."""
    email = email.strip().lower()
    password_hash = generate_password_hash(password)

    with _connect(_target(db_config)) as conn:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT employee_id FROM employees WHERE nickname=%s", (ROOT_NICKNAME,))
        existing = cur.fetchone()
        if existing:
            cur.execute(
                "UPDATE employees SET email=%s, password_hash=%s, role='root', status='active' WHERE employee_id=%s",
                (email, password_hash, int(existing["employee_id"])),
            )
        else:
            cur.execute(
                """
                INSERT INTO employees (nickname, role, status, full_name, email, password_hash, onboard_date)
                VALUES (%s, 'root', 'active', 'Root', %s, %s, CURDATE())
                """,
                (ROOT_NICKNAME, email, password_hash),
            )
    logger.info("Root account ready (%s)", email)


def list_tables(db_config: dict) -> list[str]:
    with _connect(_target(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
