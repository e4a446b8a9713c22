from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import SweepMarkerRepository


class MySQLSweepMarkerRepository(SweepMarkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, site_id: str) -> Optional[datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT last_cutoff_at FROM site_sweeps WHERE site_id=%s", (site_id,))
            row = fetchone(cur)
            return row["last_cutoff_at"] if row else None

    def advance(self, *, site_id: str, cutoff: datetime, now: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO site_sweeps(site_id, last_cutoff_at, updated_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    last_cutoff_at=GREATEST(last_cutoff_at, VALUES(last_cutoff_at)),
                    updated_at=VALUES(updated_at)
                """,
                (site_id, cutoff, now),
            )
