"""Computes and applies identity state changes to user records."""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.identity_sync.core.models.identity import (
    IdentityEvent,
    IdentityPatch,
    UserIdentitySnapshot,
)
from src.identity_sync.core.services.user.user_store import UserNotFoundError, UserStore
from src.identity_sync.core.services.webhooks.errors import (
    ApplyError,
    UnknownSubjectError,
)
from src.identity_sync.entities.core.user import User


def compute_patch(user: User, event: IdentityEvent) -> IdentityPatch:
    """Patch that brings ``user`` in line with ``event``.

    Rules:
    - events older than the user's last sync never touch MFA state or the
      sync markers, so out-of-order delivery cannot downgrade newer state;
    - email verification only ever moves from false to true;
    - a non-stale MFA change always overwrites type and enablement time,
      even when the type is unchanged (re-enrollment restarts the clock).
    """
    patch = IdentityPatch()
    stale = (
        user.last_identity_sync_at is not None
        and event.occurred_at < user.last_identity_sync_at
    )

    if event.email_verified_change and not user.email_verified:
        patch.email_verified = True

    if stale:
        return patch

    change = event.mfa_change
    if change is not None:
        patch.mfa_type = change.new_type
        patch.mfa_enabled_at = event.occurred_at if change.enabled else None

    patch.last_identity_sync_at = event.occurred_at
    patch.last_identity_sync_fingerprint = event.fingerprint
    return patch


class IdentityStateApplier:
    """The only component allowed to mutate users in response to webhooks."""

    def __init__(self, user_store: UserStore):
        self._store = user_store

    def resolve(self, event: IdentityEvent) -> User:
        """Find the user an event refers to.

        Raises:
            UnknownSubjectError: If no user is linked to the event's subject.
        """
        try:
            user = self._store.find_user_by_provider_subject(event.provider, event.subject)
        except SQLAlchemyError as exc:
            raise ApplyError("user lookup failed") from exc
        if user is None:
            raise UnknownSubjectError(f"no user for {event.provider.value} subject")
        return user

    def apply(self, event: IdentityEvent, user: User | None = None) -> UserIdentitySnapshot:
        """Apply ``event`` to its user and return the resulting identity state.

        The decision is made on a fresh, row-locked read of the user taken
        inside the caller's transaction, so a concurrent delivery that
        committed newer state after ``user`` was read is never overwritten.

        Args:
            event: Normalized event.
            user: The already-resolved user, to skip the subject lookup.

        Raises:
            UnknownSubjectError: If the subject maps to no user.
            ApplyError: If the store rejects the update.
        """
        if user is None:
            user = self.resolve(event)

        try:
            current = self._store.lock_user(user.id)
        except SQLAlchemyError as exc:
            raise ApplyError("user lock failed") from exc
        if current is None:
            raise UnknownSubjectError(f"user for {event.provider.value} subject was removed")
        user = current

        patch = compute_patch(user, event)
        if patch.last_identity_sync_at is None:
            logger.bind(
                user_id=user.id, fingerprint=event.fingerprint
            ).info("Stale identity event; MFA state left unchanged")

        if patch.is_empty():
            return user.identity_snapshot()

        try:
            updated = self._store.apply_identity_update(user.id, patch)
        except (SQLAlchemyError, UserNotFoundError) as exc:
            raise ApplyError("identity update failed") from exc
        return updated.identity_snapshot()
