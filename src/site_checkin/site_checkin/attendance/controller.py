from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.http import current_principal, login_required, to_json
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS


def _record_json(record) -> dict:
    return {
        "record_id": record.record_id,
        "worker_id": record.worker_id,
        "site_id": record.site_id,
        "signed_in_at": to_json(record.signed_in_at),
        "signed_out_at": to_json(record.signed_out_at),
        "sign_out_method": to_json(record.sign_out_method),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/sites/<site_id>/roster", methods=["GET"], endpoint="site_roster")
    @login_required
    def site_roster(site_id: str):
        rows = container.ledger.roster(caller_id=current_principal(), site_id=site_id)
        return jsonify(
            {
                "success": True,
                "on_site": len(rows),
                "roster": [
                    {
                        "record_id": r.record_id,
                        "worker_id": r.worker_id,
                        "name": r.worker_name,
                        "company": r.company,
                        "signed_in_at": to_json(r.signed_in_at),
                    }
                    for r in rows
                ],
            }
        )

    @app.route("/sites/<site_id>/attendance", methods=["GET"], endpoint="site_attendance")
    @login_required
    def site_attendance(site_id: str):
        today = now_utc().date()
        start_s = request.args.get("start") or (today - timedelta(days=DEFAULT_REPORT_DAYS)).strftime("%Y-%m-%d")
        end_s = request.args.get("end") or today.strftime("%Y-%m-%d")

        records = container.ledger.history_for_site(
            caller_id=current_principal(),
            site_id=site_id,
            start=parse_iso_date(start_s),
            end=parse_iso_date(end_s),
        )
        return jsonify({"success": True, "start": start_s, "end": end_s, "records": [_record_json(r) for r in records]})

    @app.route("/attendance/<int:record_id>/sign-out", methods=["POST"], endpoint="sign_out")
    @login_required
    def sign_out(record_id: int):
        record = container.ledger.sign_out(caller_id=current_principal(), record_id=record_id)
        return jsonify({"success": True, "record": _record_json(record)})
