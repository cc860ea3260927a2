from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence

import mysql.connector

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def read_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Any]:
    """Short-lived connection + cursor for report queries (nothing is written)."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield cur
    except mysql.connector.Error:
        logger.exception("report query failed")
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def placeholders(values: Sequence[Any]) -> str:
    """``%s,%s,...`` for an ``IN (...)`` clause; callers must not pass an empty list."""

    if not values:
        raise ValueError("IN clause needs at least one value")
    return ",".join(["%s"] * len(values))


def normalize_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_datetime(value: Any) -> Optional[datetime]:
    """Normalize timestamp columns across connector implementations.

    mysql-connector can return DATETIME/TIMESTAMP as:
    - datetime.datetime
    - string (e.g. '2026-02-01 10:00:00' or ISO with 'T')
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    raise TypeError(f"Unsupported timestamp value type: {type(value)!r}")
