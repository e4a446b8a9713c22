"""Run the auto sign-out scheduler as its own process.

One process per deployment is enough; a second one is harmless because each
sweep is idempotent and driven by the persisted sweep markers.
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.site_checkin.site_checkin.container import build_container
from src.site_checkin.site_checkin.main import configure_logging, load_settings

logger = logging.getLogger("run_scheduler")


def main() -> None:
    settings = load_settings()
    configure_logging(settings)

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    stop = threading.Event()

    def _stop(signum, _frame):
        logger.info("Received signal %s, stopping", signum)
        stop.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    container.scheduler.start()
    try:
        stop.wait()
    finally:
        container.scheduler.shutdown()


if __name__ == "__main__":
    main()
