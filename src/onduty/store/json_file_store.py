"""JSON-file backed ``DocumentStore``.

Layout: ``<data_dir>/users.json`` and ``<data_dir>/requests.json``, each a
JSON list of record dicts (order preserved). A missing file reads as an
empty list. Writes are atomic (temp file in the same directory, then
``os.replace``), so readers never see a half-written file.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import List, Sequence

import structlog

from ..core.constants import REQUESTS_FILENAME, USERS_FILENAME
from .document_store import Record

logger = structlog.get_logger(__name__)


class CorruptStoreError(RuntimeError):
    """A store file exists but does not hold a JSON list."""


class JsonFileStore:
    def __init__(self, data_dir: str | Path):
        self.lock = threading.RLock()
        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _read(self, filename: str) -> List[Record]:
        path = self._dir / filename
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            raise CorruptStoreError(f"{path} is not valid JSON: {e}")

        if not isinstance(payload, list):
            raise CorruptStoreError(f"{path} must contain a JSON list")
        return [item for item in payload if isinstance(item, dict)]

    def _write(self, filename: str, records: Sequence[Record]) -> None:
        path = self._dir / filename
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{path.stem}-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(records), f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
        logger.debug("store.written", path=str(path), records=len(records))

    def load_users(self) -> List[Record]:
        return self._read(USERS_FILENAME)

    def save_users(self, users: Sequence[Record]) -> None:
        self._write(USERS_FILENAME, users)

    def load_requests(self) -> List[Record]:
        return self._read(REQUESTS_FILENAME)

    def save_requests(self, requests: Sequence[Record]) -> None:
        self._write(REQUESTS_FILENAME, requests)
