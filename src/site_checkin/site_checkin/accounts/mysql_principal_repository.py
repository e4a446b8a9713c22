from __future__ import annotations

from datetime import datetime
from typing import Optional

import mysql.connector

from ..core.exceptions import DuplicateAccount
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Principal
from .repository import PrincipalRepository

_COLUMNS = "principal_id, email, password_hash, display_name, created_at"


def _row_to_principal(r: dict) -> Principal:
    return Principal(
        principal_id=str(r["principal_id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        display_name=r["display_name"],
        created_at=r["created_at"],
    )


class MySQLPrincipalRepository(PrincipalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM principals WHERE principal_id=%s", (principal_id,))
            row = fetchone(cur)
            return _row_to_principal(row) if row else None

    def get_by_email(self, email: str) -> Optional[Principal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM principals WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_principal(row) if row else None

    def create(
        self,
        *,
        principal_id: str,
        email: str,
        password_hash: str,
        display_name: str,
        created_at: datetime,
    ) -> Principal:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO principals(principal_id, email, password_hash, display_name, created_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (principal_id, email, password_hash, display_name, created_at),
                )
        except mysql.connector.errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateAccount("An account with this email already exists") from e
            raise

        return Principal(
            principal_id=principal_id,
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            created_at=created_at,
        )
