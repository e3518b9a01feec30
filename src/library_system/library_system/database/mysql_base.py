from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import RemoteStoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back and re-raise on failure.

    Driver errors surface as RemoteStoreError so controllers can report them
    without knowing about mysql.connector.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise RemoteStoreError(f"Database unavailable: {e.msg}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise RemoteStoreError(e.msg) from e
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


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
