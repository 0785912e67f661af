from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Optional

import structlog

from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .requests.document_request_repository import DocumentRequestRepository
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .store.document_store import DocumentStore, InMemoryDocumentStore
from .store.json_file_store import JsonFileStore
from .users.document_user_repository import DocumentUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import IdentityService

logger = structlog.get_logger(__name__)

STORE_BACKENDS = ("memory", "json", "mysql")


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    requests_repo: RequestRepository

    identity_service: IdentityService
    request_service: RequestService

    store: Optional[DocumentStore] = None
    conn: Optional[DatabaseConnection] = None


def _build_repositories(settings: dict):
    backend = str(settings.get("STORE_BACKEND", "memory")).lower()

    if backend == "memory":
        store: DocumentStore = InMemoryDocumentStore()
        return store, None, DocumentUserRepository(store), DocumentRequestRepository(store)

    if backend == "json":
        store = JsonFileStore(settings.get("DATA_DIR") or "instance/data")
        return store, None, DocumentUserRepository(store), DocumentRequestRepository(store)

    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings["DB_CONFIG"]))
        if settings.get("AUTO_INIT_DB"):
            apply_schema(conn)
        return None, conn, MySQLUserRepository(conn), MySQLRequestRepository(conn)

    raise ValueError(f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}; got {backend!r}")


def build_container(*, settings: dict) -> Container:
    store, conn, users_repo, requests_repo = _build_repositories(settings)

    identity_service = IdentityService(users_repo)
    request_service = RequestService(requests_repo)

    admin_password = str(settings.get("DEFAULT_ADMIN_PASSWORD") or "")
    seeded = identity_service.ensure_default_admin(
        name=str(settings.get("DEFAULT_ADMIN_NAME") or "Team Admin"),
        email=str(settings.get("DEFAULT_ADMIN_EMAIL") or "admin@company.local"),
        # Unset password: seed an account nobody can log into rather than an empty one.
        password=admin_password or secrets.token_urlsafe(24),
    )
    if seeded and not admin_password:
        logger.warning("account.admin_seeded_without_password", email=seeded.email)

    return Container(
        users_repo=users_repo,
        requests_repo=requests_repo,
        identity_service=identity_service,
        request_service=request_service,
        store=store,
        conn=conn,
    )
