from __future__ import annotations

from datetime import datetime
from typing import Optional

import mysql.connector

from ..core.exceptions import DuplicateCredential, DuplicateWorker
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Worker
from .repository import WorkerRepository

_COLUMNS = "worker_id, name, company, phone, credential, created_at"


def _row_to_worker(r: dict) -> Worker:
    return Worker(
        worker_id=str(r["worker_id"]),
        name=r["name"],
        company=r["company"],
        phone=r.get("phone"),
        credential=r["credential"],
        created_at=r["created_at"],
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE worker_id=%s", (worker_id,))
            row = fetchone(cur)
            return _row_to_worker(row) if row else None

    def get_by_credential(self, credential: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE credential=%s", (credential,))
            row = fetchone(cur)
            return _row_to_worker(row) if row else None

    def credential_exists(self, credential: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS hit FROM workers WHERE credential=%s", (credential,))
            return fetchone(cur) is not None

    def create(
        self,
        *,
        worker_id: str,
        name: str,
        company: str,
        phone: Optional[str],
        credential: str,
        created_at: datetime,
    ) -> Worker:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO workers(worker_id, name, company, phone, credential, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (worker_id, name, company, phone, credential, created_at),
                )
        except mysql.connector.errors.IntegrityError as e:
            if is_duplicate_key(e, index="uq_workers_credential"):
                raise DuplicateCredential("Credential already issued to another worker") from e
            if is_duplicate_key(e):
                raise DuplicateWorker("Worker profile already exists") from e
            raise

        return Worker(
            worker_id=worker_id,
            name=name,
            company=company,
            phone=phone,
            credential=credential,
            created_at=created_at,
        )

    def update_phone(self, worker_id: str, phone: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE workers SET phone=%s WHERE worker_id=%s", (phone, worker_id))
            # rowcount is 0 when the value is unchanged; existence is checked by the caller.
            return cur.rowcount > 0
