"""Check that every table the app needs exists, with row counts."""

from __future__ import annotations

import sys
from pathlib import Path

import mysql.connector

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.site_checkin.site_checkin.database.bootstrap import EXPECTED_TABLES, count_rows, list_tables
from src.site_checkin.site_checkin.main import load_settings


def main() -> int:
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)

    try:
        present = set(list_tables(db_config))
    except mysql.connector.Error as e:
        print(f"FAIL: cannot connect to {db_config.get('host')}/{db_config.get('database')}: {e}")
        return 1

    missing = 0
    for table in EXPECTED_TABLES:
        if table in present:
            print(f"OK:   {table} ({count_rows(db_config, table)} rows)")
        else:
            print(f"MISS: {table}")
            missing += 1
    return 1 if missing else 0


if __name__ == "__main__":
    raise SystemExit(main())
