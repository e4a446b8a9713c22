from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_principal, json_body, login_required, to_json
from ..container import Container


def site_json(site) -> dict:
    return {
        "site_id": site.site_id,
        "name": site.name,
        "address": site.address,
        "auto_signout_time": to_json(site.auto_signout_time),
        "created_by": site.created_by,
        "created_at": to_json(site.created_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/sites", methods=["POST"], endpoint="create_site")
    @login_required
    def create_site():
        data = json_body()
        site = container.site_registry.create(
            creator_id=current_principal(),
            name=data.get("name", ""),
            address=data.get("address"),
            cutoff=data.get("auto_signout_time"),
        )
        return jsonify({"success": True, "site": site_json(site)}), 201

    @app.route("/sites", methods=["GET"], endpoint="list_sites")
    @login_required
    def list_sites():
        sites = container.site_registry.list_for(current_principal())
        return jsonify({"success": True, "sites": [site_json(s) for s in sites]})

    @app.route("/sites/<site_id>", methods=["GET"], endpoint="get_site")
    @login_required
    def get_site(site_id: str):
        site = container.site_registry.get_for(caller_id=current_principal(), site_id=site_id)
        return jsonify({"success": True, "site": site_json(site)})

    @app.route("/sites/<site_id>", methods=["PATCH"], endpoint="update_site")
    @login_required
    def update_site(site_id: str):
        data = json_body()
        fields = {}
        if "name" in data:
            fields["name"] = data["name"]
        if "address" in data:
            fields["address"] = data["address"]
        if "auto_signout_time" in data:
            fields["cutoff"] = data["auto_signout_time"]

        site = container.site_registry.update(caller_id=current_principal(), site_id=site_id, **fields)
        return jsonify({"success": True, "site": site_json(site)})
