"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.identity_sync.api.http.app_data import ApplicationDependencies
from src.identity_sync.core.services import WebhookDispatcher


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies wired at startup."""
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session for the duration of one request."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_webhook_dispatcher(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    db_session: Session = Depends(get_db_session),
) -> WebhookDispatcher:
    """Build the per-request webhook dispatcher."""
    return WebhookDispatcher(
        db_session=db_session,
        normalizers=app_deps.normalizers,
        secrets=app_deps.webhook_secrets,
        notifier=app_deps.sync_notifier,
    )
