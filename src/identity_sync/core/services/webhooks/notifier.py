"""Fire-and-forget notification that an identity sync happened."""

from typing import Protocol

from loguru import logger

from src.identity_sync.core.models.identity import IdentityEvent, UserIdentitySnapshot


class SyncNotifier(Protocol):
    def notify(self, snapshot: UserIdentitySnapshot, event: IdentityEvent) -> None: ...


class LogSyncNotifier:
    """Records syncs as structured log entries."""

    def notify(self, snapshot: UserIdentitySnapshot, event: IdentityEvent) -> None:
        logger.bind(
            user_id=snapshot.user_id,
            provider=event.provider.value,
            event_type=event.event_type,
            fingerprint=event.fingerprint,
            mfa_type=snapshot.mfa_type.value,
            email_verified=snapshot.email_verified,
        ).info("identity.sync")
