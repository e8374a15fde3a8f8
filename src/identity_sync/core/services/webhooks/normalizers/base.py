"""Shared machinery for provider payload normalizers."""

import json
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
)

from src.identity_sync.core.models.identity import (
    IdentityEvent,
    MfaChange,
    MfaType,
    ProviderName,
)
from src.identity_sync.core.services.webhooks.errors import NormalizationError

# Provider factor / credential names, lower-cased
_MFA_TYPE_ALIASES: dict[str, MfaType] = {
    "otp": MfaType.TOTP,
    "totp": MfaType.TOTP,
    "otp-credentials": MfaType.TOTP,
    "google-authenticator": MfaType.TOTP,
    "sms": MfaType.SMS,
    "email": MfaType.EMAIL,
    "push": MfaType.PUSH,
    "push-notification": MfaType.PUSH,
    "guardian": MfaType.PUSH,
    "webauthn": MfaType.WEBAUTHN,
    "webauthn-roaming": MfaType.WEBAUTHN,
    "webauthn-platform": MfaType.WEBAUTHN,
    "webauthn-credentials": MfaType.WEBAUTHN,
    "webauthn-passwordless": MfaType.WEBAUTHN,
    "recovery-code": MfaType.RECOVERY_CODE,
    "recovery_code": MfaType.RECOVERY_CODE,
    "recovery-authn-code": MfaType.RECOVERY_CODE,
    "recovery-authn-codes": MfaType.RECOVERY_CODE,
}


def map_mfa_type(value: str | None) -> MfaType:
    """Map a provider factor name to an MfaType; unknown names map to NONE."""
    if not value:
        return MfaType.NONE
    return _MFA_TYPE_ALIASES.get(value.strip().lower(), MfaType.NONE)


def summarize_validation_error(exc: ValidationError) -> str:
    """Field locations and error kinds only; input values may be sensitive."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['type']}"
        for error in exc.errors()
    )


class UserSyncPayload(BaseModel):
    """Flat snapshot of a user's current identity state.

    This is what the Auth0 Post-Login Action ``sync-user-to-db`` posts after
    every login, and what Keycloak sync hooks post to the same contract::

        {
            "user_id": "auth0|64f1c2...",
            "email": "alice@example.com",
            "email_verified": true,
            "mfa_enabled": true,
            "mfa_type": "otp"
        }

    ``occurred_at`` (or ``timestamp``) is optional. Without it the event is
    dated by its delivery time.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1, description="Provider's user ID")
    occurred_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("occurred_at", "timestamp"),
        description="ISO-8601 timestamp or epoch seconds",
    )
    email: str | None = None
    email_verified: StrictBool | None = None
    mfa_enabled: StrictBool | None = None
    mfa_type: str | None = None

    def occurred_at_or(self, received_at: datetime) -> datetime:
        return self.occurred_at if self.occurred_at is not None else received_at


def sync_changes(payload: UserSyncPayload) -> tuple[MfaChange | None, bool | None] | None:
    """Changes carried by a sync snapshot.

    Returns:
        ``(mfa_change, email_verified_change)``, or None when the snapshot only
        reports an MFA factor this integration does not recognize.

    Raises:
        NormalizationError: If the snapshot carries no identity fields at all.
    """
    mfa_change: MfaChange | None = None
    if payload.mfa_enabled is False:
        mfa_change = MfaChange(new_type=MfaType.NONE, enabled=False)
    elif payload.mfa_enabled:
        mfa_type = map_mfa_type(payload.mfa_type)
        if mfa_type is not MfaType.NONE:
            mfa_change = MfaChange(new_type=mfa_type, enabled=True)

    if mfa_change is None and payload.email_verified is None:
        if payload.mfa_enabled:
            logger.debug("Ignoring sync with unrecognized MFA factor")
            return None
        raise NormalizationError("sync event carries no identity fields")
    return mfa_change, payload.email_verified


class PayloadNormalizer(ABC):
    """Turns one provider's raw webhook body into an IdentityEvent.

    Implementations are pure: no I/O and no state between calls. The only
    outside input is the delivery time, used when a payload carries no
    timestamp of its own.
    """

    provider: ProviderName

    def normalize(
        self, raw_body: bytes, received_at: datetime | None = None
    ) -> IdentityEvent | None:
        """Parse and normalize a raw request body.

        Args:
            raw_body: Request body, untouched.
            received_at: Delivery time; defaults to now.

        Returns:
            The normalized event, or None for event kinds this integration
            does not act on.

        Raises:
            NormalizationError: If the body is empty, not a JSON object, or
                missing data its event kind requires.
        """
        document = self._load(raw_body)
        received_at = received_at or datetime.now(UTC)
        try:
            return self._normalize_document(document, received_at)
        except ValidationError as exc:
            raise NormalizationError(summarize_validation_error(exc)) from exc

    @abstractmethod
    def _normalize_document(
        self, document: dict[str, Any], received_at: datetime
    ) -> IdentityEvent | None:
        """Map a decoded JSON object to an event."""

    @staticmethod
    def _load(raw_body: bytes) -> dict[str, Any]:
        if not raw_body or not raw_body.strip():
            raise NormalizationError("empty body")
        try:
            document = json.loads(raw_body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise NormalizationError("body is not valid JSON") from exc
        if not isinstance(document, dict):
            raise NormalizationError("body is not a JSON object")
        return document
