from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, Shift
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_mysql_datetime, to_mysql_datetime
from .model import DutyRequest
from .repository import RequestRepository

_COLUMNS = """
    request_id, user_id, user_name, duty_date, shift, reason,
    status, created_at, handled_by, handled_at
"""


def _row_to_request(r: Dict[str, Any]) -> DutyRequest:
    return DutyRequest(
        request_id=str(r["request_id"]),
        user_id=str(r["user_id"]),
        user_name=r["user_name"],
        duty_date=r["duty_date"],
        shift=Shift(r["shift"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=from_mysql_datetime(r["created_at"]),
        handled_by=r.get("handled_by"),
        handled_at=from_mysql_datetime(r.get("handled_at")),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, request: DutyRequest) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO duty_requests(
                    request_id, user_id, user_name, duty_date, shift, reason,
                    status, created_at, handled_by, handled_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.request_id,
                    request.user_id,
                    request.user_name,
                    request.duty_date,
                    request.shift.value,
                    request.reason,
                    request.status.value,
                    to_mysql_datetime(request.created_at),
                    request.handled_by,
                    to_mysql_datetime(request.handled_at),
                ),
            )

    def get_by_id(self, request_id: str) -> Optional[DutyRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM duty_requests WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[DutyRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(user_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM duty_requests
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def save_transition(
        self,
        updated: DutyRequest,
        *,
        expected: RequestStatus = RequestStatus.PENDING,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE duty_requests
                SET status=%s, handled_by=%s, handled_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    updated.status.value,
                    updated.handled_by,
                    to_mysql_datetime(updated.handled_at),
                    updated.request_id,
                    expected.value,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, request_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM duty_requests WHERE request_id=%s", (request_id,))
            return cur.rowcount > 0
