from __future__ import annotations

import json
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.identity_sync.api.http.app_data import ApplicationDependencies
from src.identity_sync.api.http.routers.health import router as health_router
from src.identity_sync.api.http.routers.webhooks import router as webhooks_router
from src.identity_sync.core.models.identity import IdentityEvent, UserIdentitySnapshot
from src.identity_sync.core.services import DbSessionService, WebhookDispatcher
from src.identity_sync.core.services.webhooks import build_normalizers

from .core import AUTH0_SUBJECT

AUTH0_SECRET = "auth0-shared-secret-for-tests"
KEYCLOAK_SECRET = "keycloak-shared-secret-for-tests"

__all__ = [
    "AUTH0_SECRET",
    "KEYCLOAK_SECRET",
    "RecordingNotifier",
    "as_body",
    "auth0_mfa_enrolled",
    "webhook_secrets",
    "notifier",
    "make_dispatcher",
    "app_dependencies",
    "client",
]


class RecordingNotifier:
    """SyncNotifier that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[UserIdentitySnapshot, IdentityEvent]] = []

    def notify(self, snapshot: UserIdentitySnapshot, event: IdentityEvent) -> None:
        self.calls.append((snapshot, event))


def as_body(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


@pytest.fixture
def auth0_mfa_enrolled() -> dict[str, Any]:
    return {
        "type": "mfa_enrolled",
        "user_id": AUTH0_SUBJECT,
        "occurred_at": "2024-05-01T12:30:00Z",
        "mfa_type": "otp",
    }


@pytest.fixture
def webhook_secrets() -> dict[str, str]:
    return {"auth0": AUTH0_SECRET, "keycloak": KEYCLOAK_SECRET}


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_dispatcher(
    db_service: DbSessionService,
    webhook_secrets: dict[str, str],
    notifier: RecordingNotifier,
) -> Generator[Callable[[], WebhookDispatcher]]:
    """Build one dispatcher per simulated request, each with its own session."""
    sessions = []

    def _make() -> WebhookDispatcher:
        db = db_service.get_session()
        sessions.append(db)
        return WebhookDispatcher(
            db_session=db,
            normalizers=build_normalizers(),
            secrets=webhook_secrets,
            notifier=notifier,
        )

    yield _make

    for db in sessions:
        db.close()


@pytest.fixture
def app_dependencies(
    db_service: DbSessionService,
    webhook_secrets: dict[str, str],
    notifier: RecordingNotifier,
) -> ApplicationDependencies:
    return ApplicationDependencies(
        database_service=db_service,
        normalizers=build_normalizers(),
        webhook_secrets=webhook_secrets,
        sync_notifier=notifier,
    )


@pytest.fixture
def client(app_dependencies: ApplicationDependencies) -> Generator[TestClient]:
    """TestClient over the routers with dependencies wired by hand."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(webhooks_router)
    app.state.app_dependencies = app_dependencies
    with TestClient(app) as test_client:
        yield test_client
