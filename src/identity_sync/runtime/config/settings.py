"""Secrets read from the process environment at startup."""

from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.identity_sync.runtime.config.config_data import WebhookConfig


class WebhookSecretSettings(BaseSettings):
    """Shared webhook secrets loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    auth0_webhook_secret: str | None = Field(
        default=None, validation_alias="AUTH0_WEBHOOK_SECRET"
    )
    keycloak_webhook_secret: str | None = Field(
        default=None, validation_alias="KEYCLOAK_WEBHOOK_SECRET"
    )

    def secret_for(self, env_var: str) -> str | None:
        """Look up a secret by the environment variable name configured for a provider."""
        field_name = env_var.lower()
        if field_name in type(self).model_fields:
            return getattr(self, field_name)
        # Providers added in config.yaml without a dedicated field
        return os.getenv(env_var) or None

    def resolve(self, webhooks: WebhookConfig) -> dict[str, str]:
        """Map every enabled provider to its secret.

        Raises:
            RuntimeError: If any enabled provider has no secret configured.
        """
        secrets: dict[str, str] = {}
        missing: list[str] = []
        for name, provider in webhooks.enabled_providers.items():
            secret = self.secret_for(provider.secret_env_var)
            if secret:
                secrets[name] = secret
            else:
                missing.append(provider.secret_env_var)

        if missing:
            raise RuntimeError(
                f"Webhook secrets not configured: {', '.join(sorted(missing))}"
            )
        return secrets
