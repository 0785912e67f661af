from __future__ import annotations

from functools import wraps
from typing import Any, Dict

from flask import g, jsonify, request

from ..core.exceptions import (
    DomainError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

STATUS_CODES = {
    ValidationError: 400,
    InvalidCredentialsError: 401,
    UnauthorizedError: 403,
    NotFoundError: 404,
    InvalidTransitionError: 409,
    DuplicateEmailError: 409,
}


def status_code_for(error: DomainError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 400


def error_response(error: DomainError):
    body: Dict[str, Any] = {"error": error.kind, "message": str(error)}
    field = getattr(error, "field", None)
    if field:
        body["field"] = field
    return jsonify(body), status_code_for(error)


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    """Requires ``g.actor``, resolved from the session before each request."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if getattr(g, "actor", None) is None:
            return jsonify({"error": "not_authenticated", "message": "please sign in"}), 401
        return view(*args, **kwargs)

    return wrapper
