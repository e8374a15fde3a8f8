"""Webhook secret CLI commands."""

import typer
from rich.panel import Panel

from src.identity_sync.core.security import generate_secure_token
from src.identity_sync.runtime.context import get_config

from .utils import console

webhook_app = typer.Typer(help="🔑 Webhook configuration commands")


@webhook_app.command("generate-secret")
def generate_secret(
    length: int = typer.Option(32, "--length", "-n", min=16, help="Random bytes of entropy"),
) -> None:
    """Generate a shared secret for a provider's webhook configuration."""
    console.print(generate_secure_token(length))


@webhook_app.command("providers")
def list_providers() -> None:
    """Show configured providers and the environment variables holding their secrets."""
    webhooks = get_config().webhooks
    lines = [
        f"[bold]{name}[/bold]: {'enabled' if provider.enabled else '[dim]disabled[/dim]'}"
        f" (secret from [cyan]{provider.secret_env_var}[/cyan])"
        for name, provider in webhooks.providers.items()
    ]
    lines.append(f"Secret header: [cyan]{webhooks.header_name}[/cyan]")
    console.print(Panel.fit("\n".join(lines), title="Webhook providers"))
