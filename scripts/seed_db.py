from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.site_checkin.site_checkin.container import build_container
from src.site_checkin.site_checkin.database.demo_seed import DEMO_ADMIN, DEMO_WORKER, ensure_demo_accounts
from src.site_checkin.site_checkin.main import configure_logging, load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config, settings=settings)
    seed = ensure_demo_accounts(container)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    print(f"    worker: {DEMO_WORKER['email']} / {DEMO_WORKER['password']} ({seed.worker_id})")
    print(f"    admin:  {DEMO_ADMIN['email']} / {DEMO_ADMIN['password']} ({seed.admin_id})")
    print(f"    site:   {seed.site_id}")


if __name__ == "__main__":
    main()
