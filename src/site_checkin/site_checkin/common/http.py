from __future__ import annotations

import logging
from datetime import datetime, time
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    Conflict,
    DomainError,
    InvalidInput,
    NotAuthorized,
    NotFound,
    StoreUnavailable,
)

logger = logging.getLogger(__name__)

SESSION_PRINCIPAL_KEY = "principal_id"

_STATUS_BY_KIND = (
    (AuthenticationError, 401),
    (NotAuthorized, 403),
    (NotFound, 404),
    (Conflict, 409),
    (InvalidInput, 400),
    (StoreUnavailable, 503),
)


def status_for(error: DomainError) -> int:
    for kind, status in _STATUS_BY_KIND:
        if isinstance(error, kind):
            return status
    return 400


def current_principal() -> str | None:
    """The authenticated principal id for this request (trusted as-is)."""

    return session.get(SESSION_PRINCIPAL_KEY)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_principal():
            return jsonify({"success": False, "error": "login_required", "message": "Please sign in"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


def to_json(value: Any) -> Any:
    """Serialize dataclass fields for jsonify (datetimes as ISO strings)."""

    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if hasattr(value, "value") and hasattr(value, "name"):
        return value.value
    return value


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.warning("%s %s -> %s", request.method, request.path, e)
        return jsonify({"success": False, "error": e.kind, "message": str(e)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "error": e.name.lower().replace(" ", "_"), "message": e.description}), e.code

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = f"Internal error: {e}" if app.config.get("DEBUG") else "Internal error"
        return jsonify({"success": False, "error": "internal_error", "message": message}), 500
