from __future__ import annotations

from flask import Flask, g, jsonify, session

from ..common.datetime_utils import now_utc
from ..common.http import json_body, login_required
from ..container import Container
from ..core.enums import Role
from .model import User


def user_to_json(user: User) -> dict:
    # Never expose password_hash.
    return {
        "user_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }


def register(app: Flask, container: Container) -> None:
    def _start_session(user: User) -> None:
        session.clear()
        session["user_id"] = user.user_id

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "Server is running", "timestamp": now_utc().isoformat()})

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        data = json_body()
        user = container.identity_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role") or Role.USER.value,
        )
        _start_session(user)
        return jsonify(user_to_json(user)), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.identity_service.login(email=data.get("email", ""), password=data.get("password", ""))
        _start_session(user)
        return jsonify(user_to_json(user))

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(user_to_json(g.actor))

    @app.route("/api/me", methods=["DELETE"], endpoint="delete_account")
    @login_required
    def delete_account():
        container.identity_service.delete_account(actor=g.actor)
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @login_required
    def list_users():
        return jsonify([user_to_json(u) for u in container.identity_service.list_members()])

    @app.route("/api/users/<user_id>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(user_id: str):
        return jsonify(user_to_json(container.identity_service.get_user(user_id)))
