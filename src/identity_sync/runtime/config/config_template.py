"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.identity_sync.runtime.config.config_data import ConfigData


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """
    def replacer(match):
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        if ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        value = os.getenv(var_expr)
        if value is None:
            raise ValueError(f"Required environment variable {var_expr} not set")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def _apply_environment_overrides(env_mode: str) -> None:
    """Promote `<ENV>_FOO` variables to `FOO` for the active environment."""
    prefix = f"{env_mode.upper()}_"
    overrides = [name for name in os.environ if name.startswith(prefix)]
    if overrides:
        # Names only; values may be secrets
        logger.info("Applying environment-specific overrides: {}", overrides)

    for var_name in overrides:
        os.environ[var_name[len(prefix):]] = os.environ[var_name]


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed configuration with environment variables substituted

    Raises:
        ValueError: If required environment variables are missing or the file is invalid
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    _apply_environment_overrides(env_mode)

    # Comments are not substituted, so they may mention placeholders freely
    substituted_content = "".join(
        line if line.lstrip().startswith("#") else substitute_env_vars(line)
        for line in content.splitlines(keepends=True)
    )

    try:
        loaded = yaml.safe_load(substituted_content)
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    try:
        config = ConfigData(**loaded.get("config", {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    for name, provider in config.webhooks.providers.items():
        if not provider.enabled:
            logger.info("Webhook provider '{}' is disabled", name)

    if not config.webhooks.enabled_providers:
        logger.warning("No webhook providers are enabled after applying configuration")

    return config


def load_config(file_path: Path | None = None) -> ConfigData:
    """Load configuration from `APP_CONFIG_FILE` (or config.yaml), or defaults if absent."""
    path = file_path or Path(os.getenv("APP_CONFIG_FILE", "config.yaml"))
    if not path.exists():
        logger.warning("Configuration file {} not found; using defaults", path)
        return ConfigData()
    return load_templated_yaml(path)
