from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from types import ModuleType

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.demo_seed import ensure_demo_accounts
from .gateway.controller import register as register_gateway
from .grants.controller import register as register_grants
from .sites.controller import register as register_sites
from .workers.controller import register as register_workers

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings(settings_module: str | None = None) -> ModuleType:
    load_dotenv(override=False)
    return importlib.import_module(settings_module or get_settings_module())


def configure_logging(settings: ModuleType) -> None:
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(*, container: Container | None = None, settings_module: str | None = None) -> Flask:
    settings = load_settings(settings_module)
    configure_logging(settings)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["RUN_SCHEDULER"] = bool(getattr(settings, "RUN_SCHEDULER", False))
    app.permanent_session_lifetime = timedelta(days=7)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, settings=settings)

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_accounts(container)

    app.extensions["site_checkin"] = container

    register_error_handlers(app)
    register_accounts(app, container)
    register_workers(app, container)
    register_sites(app, container)
    register_grants(app, container)
    register_gateway(app, container)
    register_attendance(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"success": True, "status": "ok"})

    return app
