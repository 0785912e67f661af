from __future__ import annotations

from datetime import datetime, timezone

import pytest

from onduty.core.enums import RequestStatus, Role, Shift
from onduty.requests.model import DutyRequest
from onduty.users.model import User


def make_user(user_id: str = "u_a", name: str = "Alice", role: Role = Role.USER) -> User:
    return User(
        user_id=user_id,
        name=name,
        email=f"{user_id}@example.com",
        password_hash="x",
        role=role,
    )


def make_request(
    *,
    request_id: str = "r_1",
    owner: User | None = None,
    status: RequestStatus = RequestStatus.PENDING,
    created_at: datetime | None = None,
) -> DutyRequest:
    owner = owner or make_user()
    return DutyRequest(
        request_id=request_id,
        user_id=owner.user_id,
        user_name=owner.name,
        duty_date="2024-05-01",
        shift=Shift.NIGHT,
        reason="coverage",
        status=status,
        created_at=created_at or datetime(2024, 4, 20, 9, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def alice() -> User:
    return make_user("u_a", "Alice", Role.USER)


@pytest.fixture
def carol() -> User:
    return make_user("u_c", "Carol", Role.USER)


@pytest.fixture
def bob_manager() -> User:
    return make_user("u_b", "Bob", Role.MANAGER)


@pytest.fixture
def admin() -> User:
    return make_user("u_admin", "Team Admin", Role.ADMIN)
