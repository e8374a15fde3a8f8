"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./identity_sync.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. A mounted secrets file specified by `password_file`
        2. The environment variable named by `password_env_var`
        3. Whatever is embedded in the URL (development setups)
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e

        if self.password_env_var:
            import os

            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return password

        if self.is_sqlite:
            return None

        from sqlalchemy.engine import make_url

        return make_url(self.url).password

    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        if self.is_sqlite:
            return self.url

        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password

        if base_url.password and resolved_password != base_url.password:
            logger.warning(
                "Database password from secrets does not match the one in the URL. "
                "Using the password from secrets."
            )

        if resolved_password:
            base_url = base_url.set(password=resolved_password)

        # Render manually to avoid SQLAlchemy's password masking
        return base_url.render_as_string(hide_password=False)


class WebhookProviderConfig(BaseModel):
    """Per-provider webhook configuration."""

    enabled: bool = Field(default=True, description="Accept webhooks from this provider")
    secret_env_var: str = Field(
        description="Environment variable holding the provider's shared secret"
    )


def _default_providers() -> dict[str, WebhookProviderConfig]:
    return {
        "auth0": WebhookProviderConfig(secret_env_var="AUTH0_WEBHOOK_SECRET"),
        "keycloak": WebhookProviderConfig(secret_env_var="KEYCLOAK_WEBHOOK_SECRET"),
    }


class WebhookConfig(BaseModel):
    """Identity provider webhook configuration."""

    header_name: str = Field(
        default="x-webhook-secret",
        description="Request header carrying the shared secret",
    )
    providers: dict[str, WebhookProviderConfig] = Field(
        default_factory=_default_providers,
        description="Webhook provider configurations keyed by route name",
    )

    @property
    def enabled_providers(self) -> dict[str, WebhookProviderConfig]:
        return {
            name: provider
            for name, provider in self.providers.items()
            if provider.enabled
        }


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    webhooks: WebhookConfig = Field(
        default_factory=WebhookConfig, description="Webhook configuration"
    )
