from __future__ import annotations

import importlib
from typing import Any, Optional

import structlog
from dotenv import load_dotenv
from flask import Flask, g, jsonify, session
from werkzeug.exceptions import HTTPException

from .common.http import error_response
from .config import get_settings_module
from .config.logging import configure_logging
from .container import Container, build_container
from .core.exceptions import DomainError
from .requests.controller import register as register_requests
from .users.controller import register as register_users

logger = structlog.get_logger(__name__)


def load_settings(overrides: Optional[dict] = None) -> dict:
    module_name = get_settings_module()
    module = importlib.import_module(module_name)
    settings: dict[str, Any] = {k: getattr(module, k) for k in dir(module) if k.isupper()}
    settings["SETTINGS_MODULE"] = module_name
    settings.update(overrides or {})
    return settings


def _register_session_actor(app: Flask, container: Container) -> None:
    @app.before_request
    def load_actor():
        g.actor = None
        user_id = session.get("user_id")
        if not user_id:
            return
        g.actor = container.users_repo.get_by_id(str(user_id))
        if g.actor is None:
            # Account was deleted; drop the stale session.
            session.clear()


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(e)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": "http_error", "message": e.description}), e.code
        logger.exception("request.unhandled_error")
        if app.config.get("DEBUG"):
            return jsonify({"error": "internal_error", "message": str(e)}), 500
        return jsonify({"error": "internal_error", "message": "internal server error"}), 500


def create_app(settings_overrides: Optional[dict] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(settings_overrides)

    configure_logging(debug=bool(settings.get("DEBUG", False)), log_json=bool(settings.get("LOG_JSON", False)))

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    container = build_container(settings=settings)

    logger.info(
        "app.created",
        settings=settings["SETTINGS_MODULE"],
        store=settings.get("STORE_BACKEND"),
    )

    _register_session_actor(app, container)
    _register_error_handlers(app)
    register_users(app, container)
    register_requests(app, container)

    return app
