"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.site_checkin.site_checkin.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    for site in container.site_registry.list_all():
        print(site.name, site.auto_signout_time, len(container.ledger.open_records_for(site.site_id)), "on site")

    report = container.scheduler.tick()
    print("auto sign-out closed", report.total_closed, "record(s)")


if __name__ == "__main__":
    main()
