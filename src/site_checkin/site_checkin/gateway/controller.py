from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_principal, json_body, login_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/sites/<site_id>/scan", methods=["POST"], endpoint="scan_credential")
    @login_required
    def scan_credential(site_id: str):
        """Terminal endpoint: the operator presents a scanned credential."""

        data = json_body()
        outcome = container.gateway.present(
            operator_id=current_principal(),
            credential=data.get("credential", ""),
            site_id=site_id,
        )
        record = outcome.record
        return jsonify(
            {
                "success": outcome.accepted,
                "status": outcome.status.value,
                "message": outcome.message,
                "worker": {
                    "worker_id": outcome.worker.worker_id,
                    "name": outcome.worker.name,
                    "company": outcome.worker.company,
                },
                "record_id": record.record_id if record else None,
                "signed_in_at": to_json(record.signed_in_at) if record else None,
            }
        ), (201 if outcome.accepted else 200)
