"""User identity database table model."""

from sqlalchemy import Column, String, UniqueConstraint
from sqlmodel import Field

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.entities.core._base import EntityTable


class UserIdentityTable(EntityTable, table=True):
    """Database persistence model for provider identities.

    A provider subject maps to exactly one user.
    """

    __table_args__ = (
        UniqueConstraint("provider", "subject", name="uq_identity_provider_subject"),
    )

    provider: ProviderName = Field(index=True)
    subject: str = Field(sa_column=Column(String(512), nullable=False, index=True))
    user_id: str = Field(foreign_key="usertable.id", index=True)
