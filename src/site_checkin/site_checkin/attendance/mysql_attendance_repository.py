from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import SignOutMethod
from ..core.exceptions import AlreadyOnSite
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, RosterRow
from .repository import AttendanceRepository

_COLUMNS = "record_id, worker_id, site_id, signed_in_at, signed_out_at, sign_out_method"


def _row_to_record(r: dict) -> AttendanceRecord:
    method = r.get("sign_out_method")
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        worker_id=str(r["worker_id"]),
        site_id=str(r["site_id"]),
        signed_in_at=r["signed_in_at"],
        signed_out_at=r.get("signed_out_at"),
        sign_out_method=SignOutMethod(method) if method else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE record_id=%s", (int(record_id),))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def get_open(self, *, worker_id: str, site_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE worker_id=%s AND site_id=%s AND signed_out_at IS NULL
                """,
                (worker_id, site_id),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def insert_open(self, *, worker_id: str, site_id: str, signed_in_at: datetime) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(worker_id, site_id, signed_in_at)
                    VALUES(%s,%s,%s)
                    """,
                    (worker_id, site_id, signed_in_at),
                )
                record_id = int(cur.lastrowid)
        except mysql.connector.errors.IntegrityError as e:
            if is_duplicate_key(e, index="uq_attendance_open"):
                raise AlreadyOnSite("Worker is already signed in at this site") from e
            raise

        return AttendanceRecord(
            record_id=record_id,
            worker_id=worker_id,
            site_id=site_id,
            signed_in_at=signed_in_at,
        )

    def close(self, *, record_id: int, signed_out_at: datetime, method: SignOutMethod) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET signed_out_at=%s, sign_out_method=%s
                WHERE record_id=%s AND signed_out_at IS NULL AND signed_in_at <= %s
                """,
                (signed_out_at, method.value, int(record_id), signed_out_at),
            )
            return cur.rowcount > 0

    def close_all_open_before(self, *, site_id: str, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET signed_out_at=%s, sign_out_method=%s
                WHERE site_id=%s AND signed_out_at IS NULL AND signed_in_at < %s
                """,
                (cutoff, SignOutMethod.AUTO.value, site_id, cutoff),
            )
            return int(cur.rowcount)

    def list_open_for_site(self, site_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE site_id=%s AND signed_out_at IS NULL
                ORDER BY signed_in_at ASC, record_id ASC
                """,
                (site_id,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def roster_for_site(self, site_id: str) -> Sequence[RosterRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.record_id, a.worker_id, w.name, w.company, a.signed_in_at
                FROM attendance a
                JOIN workers w ON w.worker_id = a.worker_id
                WHERE a.site_id=%s AND a.signed_out_at IS NULL
                ORDER BY a.signed_in_at ASC, a.record_id ASC
                """,
                (site_id,),
            )
            return [
                RosterRow(
                    record_id=int(r["record_id"]),
                    worker_id=str(r["worker_id"]),
                    worker_name=r["name"],
                    company=r["company"],
                    signed_in_at=r["signed_in_at"],
                )
                for r in fetchall(cur)
            ]

    def list_for_worker(self, worker_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE worker_id=%s
                ORDER BY signed_in_at DESC
                LIMIT %s
                """,
                (worker_id, int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_site(self, *, site_id: str, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE site_id=%s AND signed_in_at >= %s AND signed_in_at < %s
                ORDER BY signed_in_at DESC
                """,
                (site_id, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
