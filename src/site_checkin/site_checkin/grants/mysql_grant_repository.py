from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import SiteRole
from ..core.exceptions import SiteNotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, is_missing_parent
from .model import SiteGrant
from .repository import GrantRepository

_COLUMNS = "site_id, admin_id, role, granted_at"


def _row_to_grant(r: dict) -> SiteGrant:
    return SiteGrant(
        site_id=str(r["site_id"]),
        principal_id=str(r["admin_id"]),
        role=SiteRole(r["role"]),
        granted_at=r["granted_at"],
    )


class MySQLGrantRepository(GrantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, site_id: str, principal_id: str) -> Optional[SiteGrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM site_admins WHERE site_id=%s AND admin_id=%s",
                (site_id, principal_id),
            )
            row = fetchone(cur)
            return _row_to_grant(row) if row else None

    def list_for_principal(self, principal_id: str) -> Sequence[SiteGrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM site_admins WHERE admin_id=%s ORDER BY granted_at ASC",
                (principal_id,),
            )
            return [_row_to_grant(r) for r in fetchall(cur)]

    def list_for_site(self, site_id: str) -> Sequence[SiteGrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM site_admins WHERE site_id=%s ORDER BY granted_at ASC",
                (site_id,),
            )
            return [_row_to_grant(r) for r in fetchall(cur)]

    def insert(self, *, site_id: str, principal_id: str, role: SiteRole, granted_at: datetime) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO site_admins(site_id, admin_id, role, granted_at)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (site_id, principal_id, role.value, granted_at),
                )
                return True
        except mysql.connector.errors.IntegrityError as e:
            if is_duplicate_key(e):
                return False
            if is_missing_parent(e, constraint="fk_site_admins_site"):
                raise SiteNotFound("Site not found") from e
            raise

    def delete_keeping_an_admin(self, *, site_id: str, principal_id: str) -> Optional[bool]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the site row so two concurrent revokes cannot both pass the count.
            cur.execute("SELECT site_id FROM sites WHERE site_id=%s FOR UPDATE", (site_id,))
            if not fetchone(cur):
                return False

            cur.execute(
                "SELECT role FROM site_admins WHERE site_id=%s AND admin_id=%s",
                (site_id, principal_id),
            )
            target = fetchone(cur)
            if not target:
                return False

            if target["role"] == SiteRole.ADMIN.value:
                cur.execute(
                    "SELECT COUNT(*) AS n FROM site_admins WHERE site_id=%s AND role=%s",
                    (site_id, SiteRole.ADMIN.value),
                )
                if int(fetchone(cur)["n"]) <= 1:
                    return None

            cur.execute("DELETE FROM site_admins WHERE site_id=%s AND admin_id=%s", (site_id, principal_id))
            return cur.rowcount > 0
