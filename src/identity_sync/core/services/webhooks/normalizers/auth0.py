"""Auth0 normalizer.

Auth0 posts a flat JSON object, either from the Post-Login Action that syncs
the user's current state (no ``type``, usually no timestamp) or for a discrete
change (``mfa_enrolled``, ``mfa_removed``, ``email_verified``)::

    {
        "type": "mfa_enrolled",
        "user_id": "auth0|64f1c2...",
        "occurred_at": "2024-05-01T12:30:00Z",
        "mfa_type": "otp"
    }
"""

from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import Field

from src.identity_sync.core.models.identity import (
    IdentityEvent,
    MfaChange,
    MfaType,
    ProviderName,
)
from src.identity_sync.core.services.webhooks.errors import NormalizationError
from src.identity_sync.core.services.webhooks.normalizers.base import (
    PayloadNormalizer,
    UserSyncPayload,
    map_mfa_type,
    sync_changes,
)

SYNC_EVENT = "user.sync"
CHANGE_EVENTS = frozenset({"mfa_enrolled", "mfa_removed", "mfa_disabled", "email_verified"})


class Auth0UserUpdatePayload(UserSyncPayload):
    """Fields Auth0 sends; anything else in the body is ignored."""

    type: str = Field(default=SYNC_EVENT, min_length=1)


class Auth0PayloadNormalizer(PayloadNormalizer):
    provider = ProviderName.AUTH0

    def _normalize_document(
        self, document: dict[str, Any], received_at: datetime
    ) -> IdentityEvent | None:
        payload = Auth0UserUpdatePayload.model_validate(document)
        kind = payload.type.strip().lower()

        mfa_change: MfaChange | None = None
        email_verified_change: bool | None = None

        if kind in (SYNC_EVENT, "user_sync"):
            changes = sync_changes(payload)
            if changes is None:
                return None
            mfa_change, email_verified_change = changes
            occurred_at = payload.occurred_at_or(received_at)

        elif kind in CHANGE_EVENTS:
            # Discrete changes are dated by the provider, never by delivery
            if payload.occurred_at is None:
                raise NormalizationError(f"{kind} event requires occurred_at")
            occurred_at = payload.occurred_at

            if kind == "mfa_enrolled":
                if not payload.mfa_type:
                    raise NormalizationError("mfa_enrolled event requires mfa_type")
                mfa_type = map_mfa_type(payload.mfa_type)
                if mfa_type is MfaType.NONE:
                    logger.debug("Ignoring Auth0 enrollment of unrecognized MFA factor")
                    return None
                mfa_change = MfaChange(new_type=mfa_type, enabled=True)
            elif kind in ("mfa_removed", "mfa_disabled"):
                mfa_change = MfaChange(new_type=MfaType.NONE, enabled=False)
            else:
                email_verified_change = True

        else:
            return None

        return IdentityEvent.create(
            provider=self.provider,
            subject=payload.user_id,
            occurred_at=occurred_at,
            mfa_change=mfa_change,
            email_verified_change=email_verified_change,
            event_type=kind,
        )
