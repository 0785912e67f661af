from __future__ import annotations

from typing import Any, List, Optional, Sequence

import structlog

from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from ..core.enums import RequestAction, RequestStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError, UnauthorizedError, ValidationError
from ..users.model import User
from . import lifecycle
from .model import DutyRequest
from .repository import RequestRepository

logger = structlog.get_logger(__name__)


def parse_status(value: Any) -> Optional[RequestStatus]:
    """Status filter from user input; empty or ``all`` means no filter."""
    if value is None or value == "" or value == "all":
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError(f"unknown status: {value!r}", field="status")


def parse_limit(value: Any) -> int:
    """Page size from user input; missing means ``DEFAULT_LIST_LIMIT``."""
    if value is None or value == "":
        return DEFAULT_LIST_LIMIT
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"limit must be an integer: {value!r}", field="limit")
    if not 1 <= limit <= MAX_LIST_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}", field="limit")
    return limit


class RequestService:
    """Use cases around duty requests.

    Every operation takes the acting user explicitly; the lifecycle module
    decides, this class loads and persists.
    """

    def __init__(self, requests: RequestRepository):
        self._requests = requests

    def _get(self, request_id: str) -> DutyRequest:
        req = self._requests.get_by_id(str(request_id))
        if not req:
            raise NotFoundError("request not found")
        return req

    def get(self, request_id: str) -> DutyRequest:
        return self._get(request_id)

    def submit(self, *, actor: User, duty_date: str, shift: Any, reason: str) -> DutyRequest:
        req = lifecycle.create(actor, duty_date, shift, reason)
        self._requests.add(req)
        logger.info("request.submitted", request_id=req.request_id, user_id=actor.user_id, shift=req.shift.value)
        return req

    def _apply(self, *, actor: User, request_id: str, action: RequestAction) -> DutyRequest:
        current = self._get(request_id)
        updated = lifecycle.transition(current, actor, action)

        if not self._requests.save_transition(updated, expected=RequestStatus.PENDING):
            # Lost a race with another writer, or the record was deleted meanwhile.
            if not self._requests.get_by_id(current.request_id):
                raise NotFoundError("request not found")
            raise InvalidTransitionError(f"cannot {action.value} a request that was already handled")

        logger.info(
            "request.transitioned",
            request_id=updated.request_id,
            action=action.value,
            status=updated.status.value,
            handled_by=actor.user_id,
        )
        return updated

    def accept(self, *, actor: User, request_id: str) -> DutyRequest:
        return self._apply(actor=actor, request_id=request_id, action=RequestAction.ACCEPT)

    def reject(self, *, actor: User, request_id: str) -> DutyRequest:
        return self._apply(actor=actor, request_id=request_id, action=RequestAction.REJECT)

    def revoke(self, *, actor: User, request_id: str) -> DutyRequest:
        return self._apply(actor=actor, request_id=request_id, action=RequestAction.REVOKE)

    def handle(self, *, actor: User, request_id: str, action: Any) -> DutyRequest:
        """Dispatch a transition by name (accept/reject/revoke)."""
        parsed = lifecycle.parse_action(action)
        if parsed is RequestAction.DELETE:
            raise InvalidTransitionError("delete is not a status transition")
        return self._apply(actor=actor, request_id=request_id, action=parsed)

    def delete(self, *, actor: User, request_id: str) -> None:
        req = self._get(request_id)
        if not lifecycle.authorize(actor, RequestAction.DELETE, req):
            raise UnauthorizedError("only the owner or a manager can delete this request")

        if not self._requests.delete_by_id(req.request_id):
            raise NotFoundError("request not found")
        logger.info("request.deleted", request_id=req.request_id, deleted_by=actor.user_id)

    def list_mine(
        self,
        *,
        actor: User,
        status: Optional[RequestStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[DutyRequest]:
        return self._requests.list_requests(status=status, user_id=actor.user_id, limit=limit)

    def list_all(
        self,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[DutyRequest]:
        return self._requests.list_requests(status=status, limit=limit)

    def available_actions(self, *, actor: User, request_id: str) -> List[RequestAction]:
        return lifecycle.available_actions(actor, self._get(request_id))
