from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.http import current_principal, json_body, login_required, to_json
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import InvalidInput
from ..credentials.qr import render_png


def _worker_json(worker) -> dict:
    return {
        "worker_id": worker.worker_id,
        "name": worker.name,
        "company": worker.company,
        "phone": worker.phone,
        "credential": worker.credential,
        "created_at": to_json(worker.created_at),
    }


def _record_json(record) -> dict:
    return {
        "record_id": record.record_id,
        "site_id": record.site_id,
        "signed_in_at": to_json(record.signed_in_at),
        "signed_out_at": to_json(record.signed_out_at),
        "sign_out_method": to_json(record.sign_out_method),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/workers", methods=["POST"], endpoint="register_worker")
    @login_required
    def register_worker():
        data = json_body()
        worker = container.worker_service.register(
            principal_id=current_principal(),
            name=data.get("name", ""),
            company=data.get("company", ""),
            phone=data.get("phone"),
        )
        return jsonify({"success": True, "worker": _worker_json(worker)}), 201

    @app.route("/workers/me", methods=["GET"], endpoint="worker_me")
    @login_required
    def worker_me():
        worker = container.worker_service.get(current_principal())
        return jsonify({"success": True, "worker": _worker_json(worker)})

    @app.route("/workers/me", methods=["PATCH"], endpoint="worker_update_contact")
    @login_required
    def worker_update_contact():
        data = json_body()
        worker = container.worker_service.update_contact(principal_id=current_principal(), phone=data.get("phone"))
        return jsonify({"success": True, "worker": _worker_json(worker)})

    @app.route("/workers/me/credential.png", methods=["GET"], endpoint="worker_credential_png")
    @login_required
    def worker_credential_png():
        credential = container.worker_service.credential_for(current_principal())
        return send_file(
            io.BytesIO(render_png(credential)),
            mimetype="image/png",
            as_attachment=bool(request.args.get("download")),
            download_name="site-checkin-qr.png",
        )

    @app.route("/workers/me/attendance", methods=["GET"], endpoint="worker_attendance")
    @login_required
    def worker_attendance():
        limit_s = request.args.get("limit") or str(DEFAULT_HISTORY_LIMIT)
        if not limit_s.isdigit():
            raise InvalidInput("limit must be a positive integer")
        worker = container.worker_service.get(current_principal())
        rows = container.ledger.history_for_worker(worker.worker_id, limit=int(limit_s))
        return jsonify({"success": True, "records": [_record_json(r) for r in rows]})
