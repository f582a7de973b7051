from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateKeyError, StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _storage_error(e: mysql.connector.Error) -> StorageError:
    if getattr(e, "errno", None) == errorcode.ER_DUP_ENTRY:
        return DuplicateKeyError("Duplicate entry")
    return StorageError("Database error")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``.

    Joins the thread's open transaction when there is one; otherwise the
    statement runs in its own connection and is committed on success.
    Driver errors are re-raised as StorageError (DuplicateKeyError for a
    unique key violation).
    """

    shared = conn_factory.current()
    if shared is not None:
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        except mysql.connector.Error as e:
            logger.error("Query failed inside transaction: %s", e)
            raise _storage_error(e) from e
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Query failed: %s", e)
        raise _storage_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
