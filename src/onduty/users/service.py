from __future__ import annotations

from typing import Optional, Sequence

import structlog
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.ids import new_id
from ..common.validators import require_min_length, require_text
from ..core.constants import MIN_PASSWORD_LENGTH, USER_ID_PREFIX
from ..core.enums import Role
from ..core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from .model import User
from .repository import UserRepository

logger = structlog.get_logger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class IdentityService:
    """Use cases: register, login, delete own account, seed the default admin."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _new_user(self, *, name: str, email: str, password: str, role: Role) -> User:
        return User(
            user_id=new_id(USER_ID_PREFIX),
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )

    def register(self, *, name: str, email: str, password: str, role: Role = Role.USER) -> User:
        name = require_text(name, "name")
        email = normalize_email(require_text(email, "email"))
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        try:
            role = Role(role)
        except (ValueError, TypeError):
            raise ValidationError("unknown role", field="role")
        if role == Role.ADMIN:
            raise UnauthorizedError("admin accounts cannot be self-registered")

        if self._users.get_by_email(email):
            raise DuplicateEmailError("email already used")

        user = self._new_user(name=name, email=email, password=password, role=role)
        self._users.add(user)
        logger.info("account.registered", user_id=user.user_id, role=user.role.value)
        return user

    def login(self, *, email: str, password: str) -> User:
        if not isinstance(email, str) or not isinstance(password, str):
            logger.warning("login.failed", reason="malformed")
            raise InvalidCredentialsError("invalid email or password")

        user = self._users.get_by_email(normalize_email(email))
        if not user:
            logger.warning("login.failed", reason="unknown_email")
            raise InvalidCredentialsError("invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # Unknown hash method in a hand-edited or legacy record.
            ok = False

        if not ok:
            logger.warning("login.failed", reason="bad_password", user_id=user.user_id)
            raise InvalidCredentialsError("invalid email or password")
        return user

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(str(user_id))
        if not user:
            raise NotFoundError("user not found")
        return user

    def list_members(self) -> Sequence[User]:
        return self._users.list_all()

    def delete_account(self, *, actor: User) -> None:
        """Remove the actor's own account.

        The user's duty requests are left in place.
        """
        user = self.get_user(actor.user_id)
        if user.role == Role.ADMIN and self._users.count_by_role(Role.ADMIN) <= 1:
            raise ValidationError("cannot delete the last admin account")

        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError("user not found")
        logger.info("account.deleted", user_id=user.user_id)

    def ensure_default_admin(self, *, name: str, email: str, password: str) -> Optional[User]:
        """Seed an admin account when none exists; returns it, or None if nothing was done."""
        if self._users.count_by_role(Role.ADMIN) > 0:
            return None

        email = normalize_email(email)
        if self._users.get_by_email(email):
            raise DuplicateEmailError(f"cannot seed admin: {email} belongs to a non-admin account")

        admin = self._new_user(name=name, email=email, password=password, role=Role.ADMIN)
        self._users.add(admin)
        logger.info("account.admin_seeded", user_id=admin.user_id, email=admin.email)
        return admin
