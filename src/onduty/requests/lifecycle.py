"""Duty request lifecycle: who may move a request between which statuses.

States: ``pending`` (initial), ``accepted``, ``rejected``, ``revoked`` (terminal).

    pending --accept--> accepted     (manager/admin)
    pending --reject--> rejected     (manager/admin)
    pending --revoke--> revoked      (owner)

Deletion is not a transition; the owner or a manager/admin may delete a
request in any status.

Everything here is pure: functions take values and return values. Loading
and persisting records is the caller's job (see ``RequestService``).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, List, Optional

from ..common.datetime_utils import now_utc
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.constants import REQUEST_ID_PREFIX
from ..core.enums import RequestAction, RequestStatus, Role, Shift
from ..core.exceptions import DomainError, InvalidTransitionError, UnauthorizedError, ValidationError
from ..users.model import User
from .model import DutyRequest

HANDLER_ROLES = frozenset({Role.MANAGER, Role.ADMIN})

_TARGET_STATUS = {
    RequestAction.ACCEPT: RequestStatus.ACCEPTED,
    RequestAction.REJECT: RequestStatus.REJECTED,
    RequestAction.REVOKE: RequestStatus.REVOKED,
}


def can_manage(actor: Optional[User]) -> bool:
    """Whether the actor's role handles (accepts/rejects) requests."""
    return actor is not None and actor.role in HANDLER_ROLES


def is_owner(actor: Optional[User], request: DutyRequest) -> bool:
    return actor is not None and actor.user_id == request.user_id


def coerce_shift(value: Any) -> Shift:
    """Unknown or missing shifts fall back to morning."""
    try:
        return Shift(value)
    except (ValueError, TypeError):
        return Shift.MORNING


def parse_action(value: Any) -> RequestAction:
    try:
        return RequestAction(value)
    except (ValueError, TypeError):
        raise ValidationError(f"unknown action: {value!r}", field="action")


def _denial(request: DutyRequest, actor: Optional[User], action: RequestAction) -> Optional[DomainError]:
    # Source state is checked before the actor: a handled request fails the
    # same way for everybody.
    if action is RequestAction.DELETE:
        if is_owner(actor, request) or can_manage(actor):
            return None
        return UnauthorizedError("only the owner or a manager can delete this request")

    if RequestStatus(request.status).is_terminal:
        return InvalidTransitionError(
            f"cannot {action.value} a request that is already {RequestStatus(request.status).value}"
        )

    if action is RequestAction.REVOKE:
        if is_owner(actor, request):
            return None
        return UnauthorizedError("only the owner can revoke a request")

    if not can_manage(actor):
        return UnauthorizedError(f"only managers and admins can {action.value} requests")
    return None


def authorize(actor: Optional[User], action: Any, request: DutyRequest) -> bool:
    """True exactly when ``transition`` (or a delete) by ``actor`` would succeed."""
    try:
        parsed = parse_action(action)
    except ValidationError:
        return False
    return _denial(request, actor, parsed) is None


def available_actions(actor: Optional[User], request: DutyRequest) -> List[RequestAction]:
    return [action for action in RequestAction if authorize(actor, action, request)]


def transition(
    request: DutyRequest,
    actor: User,
    action: Any,
    *,
    now: Optional[datetime] = None,
) -> DutyRequest:
    """Apply ``action`` and return the updated record.

    Raises InvalidTransitionError when the request is not pending and
    UnauthorizedError when the actor lacks the role or ownership. The input
    record is never modified.
    """
    parsed = parse_action(action)
    if parsed is RequestAction.DELETE:
        raise InvalidTransitionError("delete is not a status transition")

    denial = _denial(request, actor, parsed)
    if denial is not None:
        raise denial

    return replace(
        request,
        status=_TARGET_STATUS[parsed],
        handled_by=actor.name,
        handled_at=now or now_utc(),
    )


def create(
    actor: User,
    duty_date: Optional[str],
    shift: Any,
    reason: Optional[str],
    *,
    now: Optional[datetime] = None,
    request_id: Optional[str] = None,
) -> DutyRequest:
    duty_date = require_non_empty(duty_date, "date")
    reason = require_non_empty(reason, "reason")

    return DutyRequest(
        request_id=request_id or new_id(REQUEST_ID_PREFIX),
        user_id=actor.user_id,
        user_name=actor.name,
        duty_date=duty_date,
        shift=coerce_shift(shift),
        reason=reason,
        status=RequestStatus.PENDING,
        created_at=now or now_utc(),
    )
