from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import to_iso
from ..common.http import json_body, login_required
from ..container import Container
from ..users.model import User
from . import lifecycle
from .model import DutyRequest
from .service import parse_limit, parse_status


def request_to_json(req: DutyRequest, actor: User) -> dict:
    return {
        "request_id": req.request_id,
        "user_id": req.user_id,
        "user_name": req.user_name,
        "date": req.duty_date,
        "shift": req.shift.value,
        "reason": req.reason,
        "status": req.status.value,
        "created_at": to_iso(req.created_at),
        "handled_by": req.handled_by,
        "handled_at": to_iso(req.handled_at),
        "actions": [a.value for a in lifecycle.available_actions(actor, req)],
    }


def register(app: Flask, container: Container) -> None:
    svc = container.request_service

    def _list_response(items, limit: int):
        # A list as long as X-List-Limit may have been cut; ask again with a larger ?limit=.
        resp = jsonify([request_to_json(r, g.actor) for r in items])
        resp.headers["X-List-Limit"] = str(limit)
        return resp

    @app.route("/api/requests", methods=["GET"], endpoint="my_requests")
    @login_required
    def my_requests():
        limit = parse_limit(request.args.get("limit"))
        items = svc.list_mine(actor=g.actor, status=parse_status(request.args.get("status")), limit=limit)
        return _list_response(items, limit)

    @app.route("/api/requests/all", methods=["GET"], endpoint="all_requests")
    @login_required
    def all_requests():
        limit = parse_limit(request.args.get("limit"))
        items = svc.list_all(status=parse_status(request.args.get("status")), limit=limit)
        return _list_response(items, limit)

    @app.route("/api/requests", methods=["POST"], endpoint="new_request")
    @login_required
    def new_request():
        data = json_body()
        req = svc.submit(
            actor=g.actor,
            duty_date=data.get("date", ""),
            shift=data.get("shift"),
            reason=data.get("reason", ""),
        )
        return jsonify(request_to_json(req, g.actor)), 201

    @app.route("/api/requests/<request_id>", methods=["GET"], endpoint="get_request")
    @login_required
    def get_request(request_id: str):
        return jsonify(request_to_json(svc.get(request_id), g.actor))

    @app.route("/api/requests/<request_id>/<action>", methods=["POST"], endpoint="handle_request")
    @login_required
    def handle_request(request_id: str, action: str):
        req = svc.handle(actor=g.actor, request_id=request_id, action=action)
        return jsonify(request_to_json(req, g.actor))

    @app.route("/api/requests/<request_id>", methods=["DELETE"], endpoint="delete_request")
    @login_required
    def delete_request(request_id: str):
        svc.delete(actor=g.actor, request_id=request_id)
        return jsonify({"ok": True})
