"""Provider-agnostic identity event and user identity state models."""

import hashlib
import json
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ProviderName(str, Enum):
    """Identity providers that can deliver user-update webhooks."""

    AUTH0 = "auth0"
    KEYCLOAK = "keycloak"


class MfaType(str, Enum):
    """Primary multi-factor authentication method of a user."""

    NONE = "none"
    TOTP = "totp"
    SMS = "sms"
    EMAIL = "email"
    PUSH = "push"
    WEBAUTHN = "webauthn"
    RECOVERY_CODE = "recovery_code"


class MfaChange(BaseModel):
    """A change of the user's MFA method reported by a provider."""

    model_config = ConfigDict(frozen=True)

    new_type: MfaType = Field(description="MFA method after the change")
    enabled: bool = Field(description="Whether MFA is enabled after the change")

    @model_validator(mode="before")
    @classmethod
    def _disabled_means_none(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("enabled") is False:
            return {**data, "new_type": MfaType.NONE}
        return data

    @model_validator(mode="after")
    def _enabled_has_type(self) -> "MfaChange":
        if self.enabled and self.new_type is MfaType.NONE:
            raise ValueError("enabled MFA change requires a concrete MFA type")
        return self


def compute_fingerprint(
    provider: ProviderName,
    subject: str,
    occurred_at: datetime,
    mfa_change: MfaChange | None,
    email_verified_change: bool | None,
) -> str:
    """Digest of the semantic fields of an event.

    Canonical JSON (sorted keys, compact separators) of the normalized fields,
    hashed with SHA-256. Transport details never reach this function.
    """
    canonical: dict[str, Any] = {
        "provider": provider.value,
        "subject": subject,
        "occurred_at": ensure_utc(occurred_at).isoformat(timespec="microseconds"),
        "mfa_change": (
            {"new_type": mfa_change.new_type.value, "enabled": mfa_change.enabled}
            if mfa_change is not None
            else None
        ),
        "email_verified_change": email_verified_change,
    }
    encoded = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class IdentityEvent(BaseModel):
    """Provider-agnostic user identity change."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderName = Field(description="Provider that emitted the event")
    subject: str = Field(min_length=1, description="Provider's stable user identifier")
    occurred_at: datetime = Field(description="When the change happened at the provider")
    mfa_change: MfaChange | None = Field(default=None)
    email_verified_change: bool | None = Field(default=None)
    event_type: str = Field(default="", description="Provider event kind, for logs")
    fingerprint: str = Field(description="Deterministic digest used for idempotency")

    @field_validator("occurred_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _has_change(self) -> "IdentityEvent":
        if self.mfa_change is None and self.email_verified_change is None:
            raise ValueError("identity event carries neither an MFA nor an email change")
        return self

    @classmethod
    def create(
        cls,
        provider: ProviderName,
        subject: str,
        occurred_at: datetime,
        mfa_change: MfaChange | None = None,
        email_verified_change: bool | None = None,
        event_type: str = "",
    ) -> "IdentityEvent":
        """Build an event, deriving its fingerprint from the normalized fields."""
        return cls(
            provider=provider,
            subject=subject,
            occurred_at=occurred_at,
            mfa_change=mfa_change,
            email_verified_change=email_verified_change,
            event_type=event_type,
            fingerprint=compute_fingerprint(
                provider, subject, occurred_at, mfa_change, email_verified_change
            ),
        )


class IdentityPatch(BaseModel):
    """Minimal set of identity fields to write back to a user record.

    Only fields present in ``model_fields_set`` are applied by the store.
    """

    mfa_type: MfaType | None = None
    mfa_enabled_at: datetime | None = None
    email_verified: bool | None = None
    last_identity_sync_at: datetime | None = None
    last_identity_sync_fingerprint: str | None = None

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}

    def is_empty(self) -> bool:
        return not self.model_fields_set


class UserIdentitySnapshot(BaseModel):
    """The identity slice of a user record, as of the end of a request."""

    user_id: str
    mfa_type: MfaType = MfaType.NONE
    mfa_enabled_at: datetime | None = None
    email_verified: bool = False
    last_identity_sync_at: datetime | None = None
    last_identity_sync_fingerprint: str | None = None
