"""Keycloak normalizer.

Keycloak's HTTP event listener posts user events, optionally wrapped in an
``{"event": {...}}`` envelope::

    {
        "id": "0f3c...",
        "time": 1714566600000,
        "type": "UPDATE_CREDENTIAL",
        "realmId": "app",
        "userId": "6c1d6a2e-...",
        "details": {"credential_type": "otp"}
    }

A body with ``user_id`` and neither ``type`` nor ``userId`` is a flat sync
snapshot, the same contract the Auth0 Post-Login Action uses.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt

from src.identity_sync.core.models.identity import (
    IdentityEvent,
    MfaChange,
    MfaType,
    ProviderName,
)
from src.identity_sync.core.services.webhooks.normalizers.base import (
    PayloadNormalizer,
    UserSyncPayload,
    map_mfa_type,
    sync_changes,
)

SYNC_EVENT = "USER_SYNC"
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class KeycloakEventDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    credential_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("credential_type", "credentialType"),
    )


class KeycloakEventPayload(BaseModel):
    """A Keycloak user event; realm, client and IP metadata are ignored."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(min_length=1)
    user_id: str = Field(min_length=1, validation_alias=AliasChoices("userId", "user_id"))
    time: StrictInt = Field(ge=0, description="Epoch milliseconds")
    details: KeycloakEventDetails = Field(default_factory=KeycloakEventDetails)

    @property
    def occurred_at(self) -> datetime:
        return _EPOCH + timedelta(milliseconds=self.time)


class KeycloakPayloadNormalizer(PayloadNormalizer):
    provider = ProviderName.KEYCLOAK

    def _normalize_document(
        self, document: dict[str, Any], received_at: datetime
    ) -> IdentityEvent | None:
        envelope = document.get("event")
        if isinstance(envelope, dict):
            document = envelope
        elif "type" not in document and "userId" not in document and "user_id" in document:
            return self._normalize_sync(UserSyncPayload.model_validate(document), received_at)

        payload = KeycloakEventPayload.model_validate(document)
        kind = payload.type.strip().upper()
        credential_type = map_mfa_type(payload.details.credential_type)

        mfa_change: MfaChange | None = None
        email_verified_change: bool | None = None

        if kind == "UPDATE_TOTP":
            mfa_change = MfaChange(new_type=MfaType.TOTP, enabled=True)
        elif kind == "REMOVE_TOTP":
            mfa_change = MfaChange(new_type=MfaType.NONE, enabled=False)
        elif kind in ("UPDATE_CREDENTIAL", "REGISTER_CREDENTIAL"):
            if credential_type is MfaType.NONE:
                return None
            mfa_change = MfaChange(new_type=credential_type, enabled=True)
        elif kind == "REMOVE_CREDENTIAL":
            if credential_type is MfaType.NONE:
                return None
            mfa_change = MfaChange(new_type=MfaType.NONE, enabled=False)
        elif kind == "VERIFY_EMAIL":
            email_verified_change = True
        else:
            return None

        return IdentityEvent.create(
            provider=self.provider,
            subject=payload.user_id,
            occurred_at=payload.occurred_at,
            mfa_change=mfa_change,
            email_verified_change=email_verified_change,
            event_type=kind,
        )

    def _normalize_sync(
        self, payload: UserSyncPayload, received_at: datetime
    ) -> IdentityEvent | None:
        changes = sync_changes(payload)
        if changes is None:
            return None
        mfa_change, email_verified_change = changes
        return IdentityEvent.create(
            provider=self.provider,
            subject=payload.user_id,
            occurred_at=payload.occurred_at_or(received_at),
            mfa_change=mfa_change,
            email_verified_change=email_verified_change,
            event_type=SYNC_EVENT,
        )
