"""User store: the persistence collaborator webhooks resolve and update users through."""

from sqlmodel import Session

from src.identity_sync.core.models.identity import IdentityPatch, ProviderName
from src.identity_sync.entities.core.user import User, UserRepository
from src.identity_sync.entities.core.user_identity import (
    UserIdentity,
    UserIdentityRepository,
)


class UserNotFoundError(LookupError):
    """Raised when a user row disappears between lookup and update."""


class UserStore:
    """Resolves provider subjects to users and applies identity patches.

    Works inside the caller's transaction; nothing here commits.
    """

    def __init__(self, db_session: Session):
        self._user_repo = UserRepository(db_session)
        self._identity_repo = UserIdentityRepository(db_session)

    def find_user_by_provider_subject(
        self, provider: ProviderName, subject: str
    ) -> User | None:
        identity = self._identity_repo.get_by_provider_subject(provider, subject)
        if identity is None:
            return None
        return self._user_repo.get(identity.user_id)

    def lock_user(self, user_id: str) -> User | None:
        """Fresh, row-locked read of a user for the rest of the transaction."""
        return self._user_repo.get_for_update(user_id)

    def apply_identity_update(self, user_id: str, patch: IdentityPatch) -> User:
        user = self._user_repo.apply_identity_update(user_id, patch)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def link_identity(self, user_id: str, provider: ProviderName, subject: str) -> UserIdentity:
        """Map a provider subject to an existing user."""
        if self._user_repo.get(user_id) is None:
            raise UserNotFoundError(user_id)
        return self._identity_repo.create(
            UserIdentity(provider=provider, subject=subject, user_id=user_id)
        )
