"""Processed event ledger table."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlmodel import Field

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.entities.core._base import EntityTable, utc_now


class ProcessedEventTable(EntityTable, table=True):
    """Ledger of applied events.

    The unique constraint on ``fingerprint`` is what makes reservations atomic
    across concurrent deliveries and across process instances.
    """

    __table_args__ = (
        UniqueConstraint("fingerprint", name="uq_processed_event_fingerprint"),
    )

    fingerprint: str = Field(sa_column=Column(String(64), nullable=False))
    user_id: str = Field(foreign_key="usertable.id", index=True)
    provider: ProviderName = Field(index=True)
    processed_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
