from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.constants import ER_DUP_ENTRY, ER_NO_REFERENCED_ROW
from ..core.exceptions import DomainError, StoreUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (
    mysql.connector.errors.InterfaceError,
    mysql.connector.errors.OperationalError,
)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction.

    Commits when the block exits cleanly and rolls back otherwise. Transient
    driver errors surface as ``StoreUnavailable``; integrity errors are left to
    the repository, which knows which constraint means what.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except DomainError:
        _rollback(conn)
        raise
    except _TRANSIENT_ERRORS as e:
        _rollback(conn)
        logger.warning("Database operation failed: %s", e)
        raise StoreUnavailable("Database is unavailable") from e
    except Exception:
        _rollback(conn)
        raise
    finally:
        conn.close()


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except _TRANSIENT_ERRORS as e:
        logger.debug("Rollback failed on a broken connection: %s", e)


def is_duplicate_key(error: Exception, *, index: Optional[str] = None) -> bool:
    """True for a duplicate-key IntegrityError (optionally on a named index)."""

    if not isinstance(error, mysql.connector.errors.IntegrityError):
        return False
    if getattr(error, "errno", None) != ER_DUP_ENTRY:
        return False
    if index is None:
        return True
    return index in str(getattr(error, "msg", "") or error)


def is_missing_parent(error: Exception, *, constraint: Optional[str] = None) -> bool:
    """True for a foreign-key IntegrityError: the referenced row does not exist."""

    if not isinstance(error, mysql.connector.errors.IntegrityError):
        return False
    if getattr(error, "errno", None) != ER_NO_REFERENCED_ROW:
        return False
    if constraint is None:
        return True
    return constraint in str(getattr(error, "msg", "") or error)


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
    - string (e.g. '18:00:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
