"""User domain entity."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from src.identity_sync.core.models.identity import (
    MfaType,
    UserIdentitySnapshot,
    ensure_utc,
)
from src.identity_sync.entities.core._base import Entity


class User(Entity):
    """User entity representing a person in the system.

    Besides profile data it carries the identity slice that provider
    webhooks reconcile: MFA method, email verification and sync markers.
    """

    first_name: str = Field(description="User's first name")
    last_name: str = Field(description="User's last name")
    email: str | None = Field(default=None, description="User's email address")

    mfa_type: MfaType = Field(default=MfaType.NONE, description="Primary MFA method")
    mfa_enabled_at: datetime | None = Field(
        default=None, description="When the current MFA method was enabled"
    )
    email_verified: bool = Field(default=False, description="Email verified at the provider")
    last_identity_sync_at: datetime | None = Field(
        default=None, description="Occurrence time of the last applied provider event"
    )
    last_identity_sync_fingerprint: str | None = Field(
        default=None, description="Fingerprint of the last applied provider event"
    )

    @field_validator(
        "created_at", "updated_at", "mfa_enabled_at", "last_identity_sync_at"
    )
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        # SQLite hands back naive datetimes
        return ensure_utc(value) if value is not None else None

    @property
    def mfa_enabled(self) -> bool:
        return self.mfa_type is not MfaType.NONE

    def identity_snapshot(self) -> UserIdentitySnapshot:
        return UserIdentitySnapshot(
            user_id=self.id,
            mfa_type=self.mfa_type,
            mfa_enabled_at=self.mfa_enabled_at,
            email_verified=self.email_verified,
            last_identity_sync_at=self.last_identity_sync_at,
            last_identity_sync_fingerprint=self.last_identity_sync_fingerprint,
        )

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring audit timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.email == other.email
            and self.identity_snapshot() == other.identity_snapshot()
        )

    def __hash__(self) -> int:
        return hash((self.id, self.first_name, self.last_name, self.email))
