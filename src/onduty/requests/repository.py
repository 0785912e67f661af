from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from .model import DutyRequest


class RequestRepository(Protocol):
    def add(self, request: DutyRequest) -> None:
        raise NotImplementedError

    def get_by_id(self, request_id: str) -> Optional[DutyRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[DutyRequest]:
        """Return requests newest first."""

        raise NotImplementedError

    def save_transition(
        self,
        updated: DutyRequest,
        *,
        expected: RequestStatus = RequestStatus.PENDING,
    ) -> bool:
        """Compare-and-swap: write ``updated`` only if the stored status is still ``expected``.

        Returns False when the record is gone or another writer got there first.
        """

        raise NotImplementedError

    def delete_by_id(self, request_id: str) -> bool:
        raise NotImplementedError
