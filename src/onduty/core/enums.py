from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


class Shift(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"


class RequestStatus(str, Enum):
    """Duty request status. Everything except PENDING is terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    REVOKED = "revoked"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class RequestAction(str, Enum):
    """Operations an actor can attempt on an existing duty request."""

    ACCEPT = "accept"
    REJECT = "reject"
    REVOKE = "revoke"
    DELETE = "delete"
