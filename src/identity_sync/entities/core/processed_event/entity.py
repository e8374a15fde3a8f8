"""Processed event ledger entity."""

from datetime import datetime

from pydantic import Field, field_validator

from src.identity_sync.core.models.identity import ProviderName, ensure_utc
from src.identity_sync.entities.core._base import Entity, utc_now


class ProcessedEventRecord(Entity):
    """Marks an event fingerprint as applied. Never updated once written."""

    fingerprint: str = Field(description="Fingerprint of the applied event")
    user_id: str = Field(description="User the event was applied to")
    provider: ProviderName = Field(description="Provider that delivered the event")
    processed_at: datetime = Field(default_factory=utc_now)

    @field_validator("processed_at", "created_at", "updated_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return ensure_utc(value)
