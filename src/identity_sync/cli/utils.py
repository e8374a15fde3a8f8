"""Shared helpers for CLI commands."""

from rich.console import Console

from src.identity_sync.core.services import DbSessionService

console = Console()


def get_database_service() -> DbSessionService:
    return DbSessionService()
