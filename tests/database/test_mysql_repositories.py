from __future__ import annotations

from datetime import datetime, time

import mysql.connector
import pytest

from src.site_checkin.site_checkin.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.site_checkin.site_checkin.core.enums import SignOutMethod, SiteRole
from src.site_checkin.site_checkin.core.exceptions import SiteNotFound
from src.site_checkin.site_checkin.grants.mysql_grant_repository import MySQLGrantRepository
from src.site_checkin.site_checkin.scheduler.mysql_sweep_repository import MySQLSweepMarkerRepository
from src.site_checkin.site_checkin.sites.mysql_site_repository import MySQLSiteRepository

from fake_mysql import FakeCursor, connect_with, duplicate_key, missing_parent

CUTOFF = datetime(2026, 3, 2, 18, 0)
NOW = datetime(2026, 3, 2, 18, 1)


# -- attendance -----------------------------------------------------------------


def test_close_only_updates_open_rows_not_before_sign_in():
    cur = FakeCursor(rowcounts=[1])
    conn, factory = connect_with(cur)

    closed = MySQLAttendanceRepository(factory).close(record_id=5, signed_out_at=NOW, method=SignOutMethod.MANUAL)

    sql, params = cur.executed[0]
    assert closed
    assert sql.startswith("UPDATE attendance SET signed_out_at=%s, sign_out_method=%s")
    assert "WHERE record_id=%s AND signed_out_at IS NULL AND signed_in_at <= %s" in sql
    assert params == (NOW, "manual", 5, NOW)
    assert conn.committed


def test_close_reports_nothing_changed():
    conn, factory = connect_with(FakeCursor(rowcounts=[0]))

    assert not MySQLAttendanceRepository(factory).close(record_id=5, signed_out_at=NOW, method=SignOutMethod.AUTO)


def test_close_all_open_before_is_one_conditional_update():
    cur = FakeCursor(rowcounts=[3])
    conn, factory = connect_with(cur)

    closed = MySQLAttendanceRepository(factory).close_all_open_before(site_id="s-1", cutoff=CUTOFF)

    assert closed == 3
    assert len(cur.executed) == 1
    sql, params = cur.executed[0]
    assert "WHERE site_id=%s AND signed_out_at IS NULL AND signed_in_at < %s" in sql
    assert params == (CUTOFF, "auto", "s-1", CUTOFF)
    assert conn.committed


# -- sites ----------------------------------------------------------------------


def _create_site(factory):
    return MySQLSiteRepository(factory).create_with_admin(
        site_id="s-1",
        name="Tower A",
        address=None,
        auto_signout_time=time(18, 0),
        creator_id="p-1",
        role=SiteRole.ADMIN,
        created_at=NOW,
    )


def test_create_with_admin_inserts_site_and_grant_in_one_transaction():
    cur = FakeCursor(rowcounts=[1, 1])
    conn, factory = connect_with(cur)

    site = _create_site(factory)

    assert site.auto_signout_time == time(18, 0)
    assert [s.split("(")[0] for s in cur.statements] == ["INSERT INTO sites", "INSERT INTO site_admins"]
    assert cur.executed[0][1] == ("s-1", "Tower A", None, "18:00:00", "p-1", NOW)
    assert cur.executed[1][1] == ("s-1", "p-1", "admin", NOW)
    assert conn.committed and not conn.rolled_back


def test_create_with_admin_rolls_back_site_when_grant_fails():
    conn, factory = connect_with(FakeCursor(errors={1: missing_parent("fk_site_admins_site")}))

    with pytest.raises(mysql.connector.errors.IntegrityError):
        _create_site(factory)

    assert conn.rolled_back
    assert not conn.committed


# -- grants ---------------------------------------------------------------------


def _insert_grant(factory):
    return MySQLGrantRepository(factory).insert(
        site_id="s-1", principal_id="p-2", role=SiteRole.SUPERVISOR, granted_at=NOW
    )


def test_grant_insert_stores_role_value():
    cur = FakeCursor(rowcounts=[1])
    conn, factory = connect_with(cur)

    assert _insert_grant(factory)
    assert cur.executed[0][1] == ("s-1", "p-2", "supervisor", NOW)
    assert conn.committed


def test_grant_insert_duplicate_returns_false():
    conn, factory = connect_with(FakeCursor(errors={0: duplicate_key("uq_site_admins_site_admin")}))

    assert _insert_grant(factory) is False
    assert conn.rolled_back


def test_grant_insert_for_missing_site_is_site_not_found():
    conn, factory = connect_with(FakeCursor(errors={0: missing_parent("fk_site_admins_site")}))

    with pytest.raises(SiteNotFound):
        _insert_grant(factory)

    assert conn.rolled_back


def _delete(cur):
    conn, factory = connect_with(cur)
    result = MySQLGrantRepository(factory).delete_keeping_an_admin(site_id="s-1", principal_id="p-1")
    return conn, result


def test_delete_refuses_last_admin_under_site_lock():
    cur = FakeCursor(rows=[{"site_id": "s-1"}, {"role": "admin"}, {"n": 1}])

    conn, result = _delete(cur)

    assert result is None
    assert cur.statements[0] == "SELECT site_id FROM sites WHERE site_id=%s FOR UPDATE"
    assert cur.executed[2][1] == ("s-1", "admin")
    assert not any(s.startswith("DELETE") for s in cur.statements)


def test_delete_admin_when_another_admin_remains():
    cur = FakeCursor(rows=[{"site_id": "s-1"}, {"role": "admin"}, {"n": 2}], rowcounts=[1, 1, 1, 1])

    conn, result = _delete(cur)

    assert result is True
    assert cur.statements[-1] == "DELETE FROM site_admins WHERE site_id=%s AND admin_id=%s"
    assert cur.executed[-1][1] == ("s-1", "p-1")
    assert conn.committed


def test_delete_supervisor_skips_admin_count():
    cur = FakeCursor(rows=[{"site_id": "s-1"}, {"role": "supervisor"}], rowcounts=[1, 1, 1])

    conn, result = _delete(cur)

    assert result is True
    assert len(cur.executed) == 3
    assert not any("COUNT(*)" in s for s in cur.statements)


@pytest.mark.parametrize("rows", [[], [{"site_id": "s-1"}]])
def test_delete_missing_site_or_grant(rows):
    conn, result = _delete(FakeCursor(rows=rows))

    assert result is False


# -- sweep markers --------------------------------------------------------------


def test_advance_upserts_marker_forward_only():
    cur = FakeCursor(rowcounts=[1])
    conn, factory = connect_with(cur)

    MySQLSweepMarkerRepository(factory).advance(site_id="s-1", cutoff=CUTOFF, now=NOW)

    sql, params = cur.executed[0]
    assert sql.startswith("INSERT INTO site_sweeps(site_id, last_cutoff_at, updated_at)")
    assert "ON DUPLICATE KEY UPDATE last_cutoff_at=GREATEST(last_cutoff_at, VALUES(last_cutoff_at))" in sql
    assert params == ("s-1", CUTOFF, NOW)
    assert conn.committed


def test_marker_get():
    conn, factory = connect_with(FakeCursor(rows=[{"last_cutoff_at": CUTOFF}]))

    assert MySQLSweepMarkerRepository(factory).get("s-1") == CUTOFF
