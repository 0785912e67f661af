from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is missing or invalid.

    ``field`` names the offending input when there is one.
    """

    kind = "validation_error"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnauthorizedError(DomainError):
    """Raised when the actor may not perform the action."""

    kind = "unauthorized"


class InvalidTransitionError(DomainError):
    """Raised when a request is not in the state the action requires."""

    kind = "invalid_transition"


class DuplicateEmailError(DomainError):
    kind = "duplicate_email"


class InvalidCredentialsError(DomainError):
    kind = "invalid_credentials"


class NotFoundError(DomainError):
    kind = "not_found"
