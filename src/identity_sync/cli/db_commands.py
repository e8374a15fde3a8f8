"""Database CLI commands."""

import typer
from rich.table import Table

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.core.services import DbManageService, UserNotFoundError, UserStore
from src.identity_sync.entities.core.processed_event import ProcessedEventRepository

from .utils import console, get_database_service

db_app = typer.Typer(help="🗄️  Database commands")


@db_app.command("init")
def init_db() -> None:
    """Create all database tables."""
    DbManageService(get_database_service()).create_all()
    console.print("[green]✅ Database tables created[/green]")


@db_app.command("ledger")
def show_ledger(
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum number of records to show"),
) -> None:
    """Show the most recently processed webhook events."""
    with get_database_service().session_scope() as session:
        repo = ProcessedEventRepository(session)
        records = repo.list_recent(limit)
        total = repo.count()

    if not records:
        console.print("[yellow]No processed events recorded yet[/yellow]")
        return

    table = Table(title=f"Processed events ({len(records)} of {total})")
    table.add_column("Processed at", style="cyan")
    table.add_column("Provider", style="magenta")
    table.add_column("User", style="green")
    table.add_column("Fingerprint", style="blue")

    for record in records:
        table.add_row(
            record.processed_at.isoformat(timespec="seconds"),
            record.provider.value,
            record.user_id,
            record.fingerprint[:16] + "…",
        )

    console.print(table)


@db_app.command("link-identity")
def link_identity(
    user_id: str = typer.Argument(..., help="Internal user ID"),
    provider: ProviderName = typer.Argument(..., help="Identity provider"),
    subject: str = typer.Argument(..., help="Provider's subject identifier for the user"),
) -> None:
    """Map a provider subject to an existing user so its webhooks apply."""
    try:
        with get_database_service().session_scope() as session:
            UserStore(session).link_identity(user_id, provider, subject)
    except UserNotFoundError as e:
        console.print(f"[red]❌ User {user_id} not found[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Linked {provider.value} subject to user {user_id}[/green]")
