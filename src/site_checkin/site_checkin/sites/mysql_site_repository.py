from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Sequence

from ..core.enums import SiteRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Site
from .repository import SiteRepository

_COLUMNS = "site_id, name, address, auto_signout_time, created_by, created_at"


def _row_to_site(r: dict) -> Site:
    return Site(
        site_id=str(r["site_id"]),
        name=r["name"],
        address=r.get("address"),
        auto_signout_time=normalize_mysql_time(r["auto_signout_time"]),
        created_by=str(r["created_by"]),
        created_at=r["created_at"],
    )


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, site_id: str) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE site_id=%s", (site_id,))
            row = fetchone(cur)
            return _row_to_site(row) if row else None

    def list_by_ids(self, site_ids: Sequence[str]) -> Sequence[Site]:
        ids = list(site_ids)
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sites WHERE site_id IN ({placeholders}) ORDER BY created_at DESC",
                tuple(ids),
            )
            return [_row_to_site(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites ORDER BY created_at ASC")
            return [_row_to_site(r) for r in fetchall(cur)]

    def create_with_admin(
        self,
        *,
        site_id: str,
        name: str,
        address: Optional[str],
        auto_signout_time: time,
        creator_id: str,
        role: SiteRole,
        created_at: datetime,
    ) -> Site:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sites(site_id, name, address, auto_signout_time, created_by, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (site_id, name, address, auto_signout_time.strftime("%H:%M:%S"), creator_id, created_at),
            )
            cur.execute(
                """
                INSERT INTO site_admins(site_id, admin_id, role, granted_at)
                VALUES(%s,%s,%s,%s)
                """,
                (site_id, creator_id, role.value, created_at),
            )

        return Site(
            site_id=site_id,
            name=name,
            address=address,
            auto_signout_time=auto_signout_time,
            created_by=creator_id,
            created_at=created_at,
        )

    def update(
        self,
        *,
        site_id: str,
        name: str,
        address: Optional[str],
        auto_signout_time: time,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sites
                SET name=%s, address=%s, auto_signout_time=%s
                WHERE site_id=%s
                """,
                (name, address, auto_signout_time.strftime("%H:%M:%S"), site_id),
            )
            return cur.rowcount > 0
