"""User identity repository."""

from sqlmodel import Session, select

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.entities.core.user_identity.entity import UserIdentity
from src.identity_sync.entities.core.user_identity.table import UserIdentityTable


class UserIdentityRepository:
    """Data-access layer for user identities."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_provider_subject(
        self, provider: ProviderName, subject: str
    ) -> UserIdentity | None:
        statement = select(UserIdentityTable).where(
            (UserIdentityTable.provider == provider)
            & (UserIdentityTable.subject == subject)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return UserIdentity.model_validate(row, from_attributes=True)

    def list_for_user(self, user_id: str) -> list[UserIdentity]:
        statement = select(UserIdentityTable).where(UserIdentityTable.user_id == user_id)
        return [
            UserIdentity.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

    def create(self, identity: UserIdentity) -> UserIdentity:
        row = UserIdentityTable.model_validate(identity, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return identity
