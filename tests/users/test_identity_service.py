from __future__ import annotations

import threading
import time

import pytest

from onduty.core.enums import Role
from onduty.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from onduty.store.document_store import InMemoryDocumentStore
from onduty.users.document_user_repository import DocumentUserRepository
from onduty.users.service import IdentityService


@pytest.fixture
def users_repo():
    return DocumentUserRepository(InMemoryDocumentStore())


@pytest.fixture
def svc(users_repo):
    return IdentityService(users_repo)


def test_register_hashes_password_and_normalizes_email(svc, users_repo):
    user = svc.register(name="Alice", email="  Alice@Example.COM ", password="secret1")

    assert user.email == "alice@example.com"
    assert user.role == Role.USER
    assert user.user_id.startswith("u_")
    assert user.password_hash != "secret1"
    assert "secret1" not in user.password_hash
    assert users_repo.get_by_id(user.user_id) == user


def test_register_duplicate_email_leaves_count_unchanged(svc, users_repo):
    svc.register(name="Alice", email="a@example.com", password="secret1")

    with pytest.raises(DuplicateEmailError):
        svc.register(name="Other Alice", email="A@example.com", password="secret2", role=Role.MANAGER)

    assert len(users_repo.list_all()) == 1


def test_register_accepts_manager_role_string(svc):
    assert svc.register(name="Bob", email="b@example.com", password="secret1", role="manager").role == Role.MANAGER


def test_register_refuses_admin(svc):
    with pytest.raises(UnauthorizedError):
        svc.register(name="Eve", email="e@example.com", password="secret1", role=Role.ADMIN)


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"name": "", "email": "a@example.com", "password": "secret1"}, "name"),
        ({"name": "A", "email": " ", "password": "secret1"}, "email"),
        ({"name": "A", "email": "a@example.com", "password": "123"}, "password"),
        ({"name": "A", "email": "a@example.com", "password": "secret1", "role": "owner"}, "role"),
    ],
)
def test_register_validation(svc, kwargs, field):
    with pytest.raises(ValidationError) as exc:
        svc.register(**kwargs)
    assert exc.value.field == field


def test_login(svc):
    user = svc.register(name="Alice", email="a@example.com", password="secret1")

    assert svc.login(email="A@EXAMPLE.com", password="secret1") == user
    with pytest.raises(InvalidCredentialsError):
        svc.login(email="a@example.com", password="wrong-pass")
    with pytest.raises(InvalidCredentialsError):
        svc.login(email="nobody@example.com", password="secret1")


def test_login_with_unusable_hash_fails_cleanly(users_repo, svc):
    from onduty.users.model import User

    users_repo.add(User(user_id="u_legacy", name="Old", email="old@example.com", password_hash="admin", role=Role.USER))
    with pytest.raises(InvalidCredentialsError):
        svc.login(email="old@example.com", password="admin")


def test_ensure_default_admin_seeds_once(svc, users_repo):
    seeded = svc.ensure_default_admin(name="Team Admin", email="admin@company.local", password="admin123")

    assert seeded is not None and seeded.role == Role.ADMIN
    assert svc.login(email="admin@company.local", password="admin123") == seeded
    assert svc.ensure_default_admin(name="Team Admin", email="admin@company.local", password="admin123") is None
    assert users_repo.count_by_role(Role.ADMIN) == 1


def test_ensure_default_admin_refuses_to_reuse_a_taken_email(svc):
    svc.register(name="Alice", email="admin@company.local", password="secret1")
    with pytest.raises(DuplicateEmailError):
        svc.ensure_default_admin(name="Team Admin", email="admin@company.local", password="admin123")


def test_delete_account_keeps_other_users(svc, users_repo):
    alice = svc.register(name="Alice", email="a@example.com", password="secret1")
    bob = svc.register(name="Bob", email="b@example.com", password="secret1")

    svc.delete_account(actor=alice)

    assert users_repo.get_by_id(alice.user_id) is None
    assert [u.user_id for u in svc.list_members()] == [bob.user_id]
    with pytest.raises(NotFoundError):
        svc.delete_account(actor=alice)
    with pytest.raises(NotFoundError):
        svc.get_user(alice.user_id)


def test_last_admin_cannot_be_deleted(svc, users_repo):
    admin = svc.ensure_default_admin(name="Team Admin", email="admin@company.local", password="admin123")

    with pytest.raises(ValidationError):
        svc.delete_account(actor=admin)
    assert users_repo.get_by_id(admin.user_id) == admin


class SlowStore(InMemoryDocumentStore):
    """Widens the window between reading the users and writing them back."""

    def load_users(self):
        users = super().load_users()
        time.sleep(0.05)
        return users


def test_concurrent_registrations_with_one_email_create_one_user():
    users_repo = DocumentUserRepository(SlowStore())
    svc = IdentityService(users_repo)
    errors = []

    def register(name):
        try:
            svc.register(name=name, email="dup@example.com", password="secret1")
        except DuplicateEmailError as e:
            errors.append(e)

    threads = [threading.Thread(target=register, args=(name,)) for name in ("First", "Second")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert [u.email for u in users_repo.list_all()] == ["dup@example.com"]
    assert len(errors) == 1


def test_repository_add_refuses_a_taken_email(users_repo):
    from onduty.users.model import User

    users_repo.add(User(user_id="u_1", name="A", email="a@example.com", password_hash="x", role=Role.USER))
    with pytest.raises(DuplicateEmailError):
        users_repo.add(User(user_id="u_2", name="B", email="a@example.com", password_hash="x", role=Role.USER))
    assert [u.user_id for u in users_repo.list_all()] == ["u_1"]


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"name": "A", "email": "a@example.com", "password": 1234567}, "password"),
        ({"name": "A", "email": "a@example.com", "password": None}, "password"),
        ({"name": "A", "email": 5, "password": "secret1"}, "email"),
        ({"name": ["A"], "email": "a@example.com", "password": "secret1"}, "name"),
    ],
)
def test_register_rejects_non_string_fields(svc, users_repo, kwargs, field):
    with pytest.raises(ValidationError) as exc:
        svc.register(**kwargs)
    assert exc.value.field == field
    assert users_repo.list_all() == []


@pytest.mark.parametrize(
    "email,password",
    [(5, "secret1"), ("a@example.com", 123456), (None, "secret1"), ("a@example.com", None)],
)
def test_login_rejects_non_string_credentials(svc, email, password):
    svc.register(name="Alice", email="a@example.com", password="secret1")
    with pytest.raises(InvalidCredentialsError):
        svc.login(email=email, password=password)
