from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import SESSION_PRINCIPAL_KEY, current_principal, json_body, login_required
from ..container import Container


def _account_json(view) -> dict:
    return {
        "principal_id": view.principal_id,
        "display_name": view.display_name,
        "is_worker": view.is_worker,
        "worker_id": view.worker.worker_id if view.worker else None,
        "grants": [{"site_id": site_id, "role": role.value} for site_id, role in sorted(view.grants)],
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = json_body()
        principal = container.auth_service.sign_up(
            email=data.get("email", ""),
            password=data.get("password", ""),
            display_name=data.get("name", ""),
        )
        session.clear()
        session[SESSION_PRINCIPAL_KEY] = principal.principal_id
        return jsonify({"success": True, "principal_id": principal.principal_id}), 201

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_principal = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session[SESSION_PRINCIPAL_KEY] = s_principal.principal_id
        return jsonify({"success": True, "principal_id": s_principal.principal_id, "name": s_principal.display_name})

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        view = container.auth_service.describe(current_principal())
        return jsonify({"success": True, "account": _account_json(view)})
