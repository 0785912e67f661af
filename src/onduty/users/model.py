from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; no storage code. ``password_hash`` is a werkzeug
    salted hash, never the raw password.
    """

    user_id: str
    name: str
    email: str
    password_hash: str
    role: Role
