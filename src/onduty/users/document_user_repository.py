from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import DuplicateEmailError
from ..store.document_store import DocumentStore, Record
from .model import User
from .repository import UserRepository


def user_to_record(user: User) -> Record:
    return {
        "user_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "password_hash": user.password_hash,
        "role": user.role.value,
    }


def user_from_record(r: Record) -> User:
    return User(
        user_id=str(r["user_id"]),
        name=r["name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
    )


class DocumentUserRepository(UserRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def _all(self) -> list[User]:
        return [user_from_record(r) for r in self._store.load_users()]

    def get_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self._all() if u.user_id == user_id), None)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._all() if u.email == email), None)

    def list_all(self) -> Sequence[User]:
        return self._all()

    def add(self, user: User) -> None:
        with self._store.lock:
            records = self._store.load_users()
            if any(r.get("email") == user.email for r in records):
                raise DuplicateEmailError("email already used")
            records.append(user_to_record(user))
            self._store.save_users(records)

    def delete_by_id(self, user_id: str) -> bool:
        with self._store.lock:
            records = self._store.load_users()
            kept = [r for r in records if r.get("user_id") != user_id]
            if len(kept) == len(records):
                return False
            self._store.save_users(kept)
            return True

    def count_by_role(self, role: Role) -> int:
        return sum(1 for u in self._all() if u.role == role)
