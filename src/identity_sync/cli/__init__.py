"""Main CLI application module."""

import typer
from dotenv.main import load_dotenv

# config.yaml placeholders are filled from the environment when the commands import
load_dotenv()

from .db_commands import db_app  # noqa: E402
from .webhook_commands import webhook_app  # noqa: E402

app = typer.Typer(
    help="🔐 Identity Sync CLI - database and webhook administration",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")
app.add_typer(webhook_app, name="webhooks")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
