from __future__ import annotations

from datetime import datetime, time, timedelta

import mysql.connector
import pytest

from src.site_checkin.site_checkin.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.site_checkin.site_checkin.core.exceptions import AlreadyOnSite, InvalidInput, StoreUnavailable
from src.site_checkin.site_checkin.database.mysql_base import (
    db_cursor,
    is_duplicate_key,
    is_missing_parent,
    normalize_mysql_time,
)

from fake_mysql import FakeCursor, connect_with, duplicate_key, missing_parent


def test_db_cursor_commits_and_closes():
    conn, factory = connect_with(FakeCursor())

    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed and cur.closed
    assert not conn.rolled_back


def test_db_cursor_rolls_back_domain_errors():
    conn, factory = connect_with(FakeCursor())

    with pytest.raises(InvalidInput):
        with db_cursor(factory):
            raise InvalidInput("nope")

    assert conn.rolled_back and conn.closed
    assert not conn.committed


def test_db_cursor_maps_transient_errors_to_store_unavailable():
    conn, factory = connect_with(
        FakeCursor(errors={0: mysql.connector.errors.OperationalError(msg="Lost connection", errno=2013)})
    )

    with pytest.raises(StoreUnavailable):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")

    assert conn.rolled_back and conn.closed


def test_is_duplicate_key():
    assert is_duplicate_key(duplicate_key("uq_attendance_open"))
    assert is_duplicate_key(duplicate_key("uq_attendance_open"), index="uq_attendance_open")
    assert not is_duplicate_key(duplicate_key("PRIMARY"), index="uq_attendance_open")
    assert not is_duplicate_key(missing_parent("fk_attendance_site"))
    assert not is_duplicate_key(ValueError("Duplicate entry"))


def test_is_missing_parent():
    assert is_missing_parent(missing_parent("fk_site_admins_site"))
    assert is_missing_parent(missing_parent("fk_site_admins_site"), constraint="fk_site_admins_site")
    assert not is_missing_parent(missing_parent("fk_attendance_site"), constraint="fk_site_admins_site")
    assert not is_missing_parent(duplicate_key("uq_site_admins_site_admin"))


def test_insert_open_maps_open_record_constraint():
    conn, factory = connect_with(FakeCursor(errors={0: duplicate_key("uq_attendance_open")}))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(AlreadyOnSite):
        repo.insert_open(worker_id="w-1", site_id="s-1", signed_in_at=datetime(2026, 3, 2, 8, 0))

    assert conn.rolled_back


def test_insert_open_returns_new_record():
    conn, factory = connect_with(FakeCursor())
    repo = MySQLAttendanceRepository(factory)

    record = repo.insert_open(worker_id="w-1", site_id="s-1", signed_in_at=datetime(2026, 3, 2, 8, 0))

    assert record.record_id == 7
    assert record.is_open
    assert conn.committed


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        (time(18, 0), time(18, 0)),
        (timedelta(hours=17, minutes=30), time(17, 30)),
        ("06:05:04", time(6, 5, 4)),
        ("06:05", time(6, 5)),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected
