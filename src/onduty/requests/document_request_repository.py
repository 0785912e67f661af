from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_iso, to_iso
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, Shift
from ..store.document_store import DocumentStore, Record
from .model import DutyRequest
from .repository import RequestRepository


def request_to_record(req: DutyRequest) -> Record:
    return {
        "request_id": req.request_id,
        "user_id": req.user_id,
        "user_name": req.user_name,
        "duty_date": req.duty_date,
        "shift": req.shift.value,
        "reason": req.reason,
        "status": req.status.value,
        "created_at": to_iso(req.created_at),
        "handled_by": req.handled_by,
        "handled_at": to_iso(req.handled_at),
    }


def request_from_record(r: Record) -> DutyRequest:
    return DutyRequest(
        request_id=str(r["request_id"]),
        user_id=str(r["user_id"]),
        user_name=r.get("user_name") or "",
        duty_date=r["duty_date"],
        shift=Shift(r["shift"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=from_iso(r["created_at"]),
        handled_by=r.get("handled_by"),
        handled_at=from_iso(r.get("handled_at")),
    )


class DocumentRequestRepository(RequestRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def add(self, request: DutyRequest) -> None:
        with self._store.lock:
            records = self._store.load_requests()
            records.append(request_to_record(request))
            self._store.save_requests(records)

    def get_by_id(self, request_id: str) -> Optional[DutyRequest]:
        for r in self._store.load_requests():
            if r.get("request_id") == request_id:
                return request_from_record(r)
        return None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[DutyRequest]:
        items = [request_from_record(r) for r in self._store.load_requests()]
        if status is not None:
            items = [r for r in items if r.status == status]
        if user_id is not None:
            items = [r for r in items if r.user_id == user_id]
        # Stable sort keeps insertion order for equal timestamps; reversed for newest first.
        items = list(reversed(items))
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[: int(limit)]

    def save_transition(
        self,
        updated: DutyRequest,
        *,
        expected: RequestStatus = RequestStatus.PENDING,
    ) -> bool:
        with self._store.lock:
            records = self._store.load_requests()
            for i, r in enumerate(records):
                if r.get("request_id") != updated.request_id:
                    continue
                if r.get("status") != expected.value:
                    return False
                records[i] = request_to_record(updated)
                self._store.save_requests(records)
                return True
            return False

    def delete_by_id(self, request_id: str) -> bool:
        with self._store.lock:
            records = self._store.load_requests()
            kept = [r for r in records if r.get("request_id") != request_id]
            if len(kept) == len(records):
                return False
            self._store.save_requests(kept)
            return True
