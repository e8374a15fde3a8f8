"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from src.identity_sync.runtime.config.config_data import DatabaseConfig
from src.identity_sync.runtime.context import get_config


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig | None = None):
        """Initialize the shared database engine and session factory."""
        main_config = get_config()
        db_config = db_config or main_config.database
        environment = main_config.app.environment

        logger.info("Configuring database engine for environment: {}", environment)
        engine_kwargs: dict = {
            "echo": False,
            "pool_pre_ping": True,
            "connect_args": self._get_connect_args(db_config, environment),
        }

        if db_config.url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        elif not db_config.is_sqlite:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                }
            )

        self._engine = create_engine(db_config.connection_string, **engine_kwargs)

    @property
    def engine(self):
        return self._engine

    def _get_connect_args(self, db_config: DatabaseConfig, environment: str) -> dict:
        """Get database-specific connection arguments."""
        if db_config.is_sqlite:
            if environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for concurrent webhook delivery."
                )
            return {"check_same_thread": False, "timeout": 20}

        if "postgresql" in db_config.url:
            return {
                "application_name": f"{environment}_identity_sync",
                "connect_timeout": 30,
            }
        return {}

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(error_type=type(e).__name__).error("Database transaction failed")
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.bind(error_type=type(e).__name__).error("Database health check failed")
            return False

    def dispose(self) -> None:
        self._engine.dispose()
