"""Schema management for the application's tables."""

from loguru import logger
from sqlmodel import SQLModel

from src.identity_sync.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, database_service: DbSessionService | None = None):
        self._database_service = database_service or DbSessionService()

    def create_all(self) -> None:
        """Create all database tables."""
        # Register the tables with SQLModel's metadata
        from src.identity_sync.entities.core.processed_event import (  # noqa: F401
            ProcessedEventTable,
        )
        from src.identity_sync.entities.core.user import UserTable  # noqa: F401
        from src.identity_sync.entities.core.user_identity import (  # noqa: F401
            UserIdentityTable,
        )

        SQLModel.metadata.create_all(self._database_service.engine)
        logger.info("Database initialized with tables.")
