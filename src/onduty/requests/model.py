from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus, Shift


@dataclass(frozen=True)
class DutyRequest:
    """An on-duty request.

    ``user_id``/``user_name`` are a snapshot of the requester taken at
    creation time; they are not kept in sync with the user record.
    """

    request_id: str
    user_id: str
    user_name: str
    duty_date: str
    shift: Shift
    reason: str
    status: RequestStatus
    created_at: datetime
    handled_by: Optional[str] = None
    handled_at: Optional[datetime] = None
