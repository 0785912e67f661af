"""Store collaborator: bulk load/save of plain record dicts.

Any medium can implement ``DocumentStore`` (memory, files, a document
database). Repositories in ``users``/``requests`` adapt it to the
per-record interfaces the services use.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, List, Optional, Protocol, Sequence

Record = Dict[str, Any]


class DocumentStore(Protocol):
    # Held by repositories around read-modify-write sequences.
    lock: threading.RLock

    def load_users(self) -> List[Record]:
        raise NotImplementedError

    def save_users(self, users: Sequence[Record]) -> None:
        raise NotImplementedError

    def load_requests(self) -> List[Record]:
        raise NotImplementedError

    def save_requests(self, requests: Sequence[Record]) -> None:
        raise NotImplementedError


class InMemoryDocumentStore:
    """Keeps deep copies so callers can never mutate stored records in place."""

    def __init__(
        self,
        *,
        users: Optional[Sequence[Record]] = None,
        requests: Optional[Sequence[Record]] = None,
    ):
        self.lock = threading.RLock()
        self._users: List[Record] = copy.deepcopy(list(users or []))
        self._requests: List[Record] = copy.deepcopy(list(requests or []))

    def load_users(self) -> List[Record]:
        return copy.deepcopy(self._users)

    def save_users(self, users: Sequence[Record]) -> None:
        self._users = copy.deepcopy(list(users))

    def load_requests(self) -> List[Record]:
        return copy.deepcopy(self._requests)

    def save_requests(self, requests: Sequence[Record]) -> None:
        self._requests = copy.deepcopy(list(requests))
