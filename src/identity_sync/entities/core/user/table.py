"""User database table model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlmodel import Field

from src.identity_sync.core.models.identity import MfaType
from src.identity_sync.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users."""

    first_name: str
    last_name: str
    email: str | None = None

    mfa_type: MfaType = Field(default=MfaType.NONE)
    mfa_enabled_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    email_verified: bool = Field(default=False)
    last_identity_sync_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    last_identity_sync_fingerprint: str | None = Field(
        default=None, sa_column=Column(String(64), nullable=True)
    )
