"""Core services exports."""

from .database.db_manage import DbManageService
from .database.db_session import DbSessionService
from .user.user_store import UserNotFoundError, UserStore
from .webhooks import (
    LogSyncNotifier,
    SyncNotifier,
    WebhookDispatcher,
    WebhookOutcome,
    build_normalizers,
)

__all__ = [
    # Database Services
    "DbManageService",
    "DbSessionService",
    # User Services
    "UserNotFoundError",
    "UserStore",
    # Webhook Services
    "LogSyncNotifier",
    "SyncNotifier",
    "WebhookDispatcher",
    "WebhookOutcome",
    "build_normalizers",
]
