"""User repository for data access operations."""

from datetime import UTC, datetime

from sqlmodel import Session

from src.identity_sync.core.models.identity import IdentityPatch
from src.identity_sync.entities.core.user.entity import User
from src.identity_sync.entities.core.user.table import UserTable


class UserRepository:
    """Data-access layer for users.

    Writes are flushed but never committed; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_for_update(self, user_id: str) -> User | None:
        """Re-read a user inside the current transaction and lock its row.

        Bypasses the session identity map so a concurrent commit is never
        masked by an earlier read. The lock is a no-op on SQLite, where the
        caller's prior write already serializes writers.
        """
        row = self._session.get(
            UserTable, user_id, with_for_update=True, populate_existing=True
        )
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def create(self, user: User) -> User:
        row = UserTable.model_validate(user, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return user

    def update(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise ValueError(f"User {user.id} not found")

        for field_name, value in user.model_dump(
            exclude={"id", "created_at", "updated_at"}
        ).items():
            setattr(row, field_name, value)
        row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        return User.model_validate(row, from_attributes=True)

    def apply_identity_update(self, user_id: str, patch: IdentityPatch) -> User | None:
        """Write the fields set on ``patch`` to the user row.

        Returns:
            The updated user, or None if the user does not exist.
        """
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None

        for field_name, value in patch.changes().items():
            setattr(row, field_name, value)
        row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        return User.model_validate(row, from_attributes=True)
