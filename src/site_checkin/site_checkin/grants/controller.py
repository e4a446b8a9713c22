from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_principal, json_body, login_required, to_json
from ..container import Container
from ..core.enums import SiteRole


def _grant_json(grant) -> dict:
    return {
        "site_id": grant.site_id,
        "principal_id": grant.principal_id,
        "role": grant.role.value,
        "granted_at": to_json(grant.granted_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/sites/<site_id>/admins", methods=["GET"], endpoint="list_site_admins")
    @login_required
    def list_site_admins(site_id: str):
        grants = container.directory.list_for_site(caller_id=current_principal(), site_id=site_id)
        return jsonify({"success": True, "admins": [_grant_json(g) for g in grants]})

    @app.route("/sites/<site_id>/admins", methods=["POST"], endpoint="invite_site_admin")
    @login_required
    def invite_site_admin(site_id: str):
        data = json_body()
        grant = container.directory.invite(
            caller_id=current_principal(),
            site_id=site_id,
            principal_id=data.get("principal_id", ""),
            role=data.get("role") or SiteRole.SUPERVISOR.value,
        )
        return jsonify({"success": True, "grant": _grant_json(grant)}), 201

    @app.route("/sites/<site_id>/admins/<principal_id>", methods=["DELETE"], endpoint="revoke_site_admin")
    @login_required
    def revoke_site_admin(site_id: str, principal_id: str):
        container.directory.revoke(caller_id=current_principal(), site_id=site_id, principal_id=principal_id)
        return jsonify({"success": True})
