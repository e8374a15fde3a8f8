from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime

import pytest
from sqlmodel import Session

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.core.services import DbManageService, DbSessionService, UserStore
from src.identity_sync.entities.core.processed_event import ProcessedEventRepository
from src.identity_sync.entities.core.user import User, UserRepository
from src.identity_sync.runtime.config.config_data import DatabaseConfig

AUTH0_SUBJECT = "auth0|64f1c2aa0b1d"
KEYCLOAK_SUBJECT = "6c1d6a2e-0f5b-4c41-9a5e-3f2f7a3c9d10"

__all__ = [
    "AUTH0_SUBJECT",
    "KEYCLOAK_SUBJECT",
    "db_service",
    "file_db_service",
    "seed_user",
    "session",
    "user",
    "fetch_user",
    "ledger_count",
    "ts",
]


def ts(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    return datetime.fromisoformat(value).astimezone(UTC)


@pytest.fixture
def db_service() -> Generator[DbSessionService]:
    """Fresh in-memory database per test, shared by every session it hands out."""
    service = DbSessionService(DatabaseConfig(url="sqlite://"))
    DbManageService(service).create_all()
    try:
        yield service
    finally:
        service.dispose()


@pytest.fixture
def file_db_service(tmp_path) -> Generator[DbSessionService]:
    """File-backed database, so each session gets its own connection and lock."""
    service = DbSessionService(DatabaseConfig(url=f"sqlite:///{tmp_path / 'sync.db'}"))
    DbManageService(service).create_all()
    try:
        yield service
    finally:
        service.dispose()


def seed_user(service: DbSessionService) -> User:
    """Commit Alice, linked to one subject at each provider."""
    alice = User(first_name="Alice", last_name="Liddell", email="alice@example.com")
    with service.session_scope() as db:
        UserRepository(db).create(alice)
        store = UserStore(db)
        store.link_identity(alice.id, ProviderName.AUTH0, AUTH0_SUBJECT)
        store.link_identity(alice.id, ProviderName.KEYCLOAK, KEYCLOAK_SUBJECT)
    return alice


@pytest.fixture
def session(db_service: DbSessionService) -> Generator[Session]:
    db = db_service.get_session()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture
def user(db_service: DbSessionService) -> User:
    """A committed user linked to one subject at each provider."""
    return seed_user(db_service)


@pytest.fixture
def fetch_user(db_service: DbSessionService) -> Callable[[str], User | None]:
    """Read a user through a new session so cached rows never mask a write."""

    def _fetch(user_id: str) -> User | None:
        with db_service.session_scope() as db:
            return UserRepository(db).get(user_id)

    return _fetch


@pytest.fixture
def ledger_count(db_service: DbSessionService) -> Callable[[], int]:
    def _count() -> int:
        with db_service.session_scope() as db:
            return ProcessedEventRepository(db).count()

    return _count
