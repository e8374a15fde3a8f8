"""User identity domain entity."""

from pydantic import Field

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.entities.core._base import Entity


class UserIdentity(Entity):
    """Maps a provider's subject identifier to an internal user."""

    provider: ProviderName = Field(description="Identity provider that owns the subject")
    subject: str = Field(description="Provider's stable identifier for the user")
    user_id: str = Field(description="Internal user ID this identity maps to")
