"""Tests for the identity-sync command line interface."""

import pytest
from typer.testing import CliRunner

from src.identity_sync.cli import app
from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.core.services import UserStore
from src.identity_sync.core.services.webhooks import IdempotencyGuard
from src.identity_sync.entities.core.user import User, UserRepository

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(db_service, monkeypatch):
    """Point every CLI command at the test database."""
    monkeypatch.setattr(
        "src.identity_sync.cli.db_commands.get_database_service", lambda: db_service
    )
    # Wide enough that rich never truncates table cells
    monkeypatch.setattr("src.identity_sync.cli.utils.console.width", 200)
    return db_service


class TestDbCommands:
    def test_init(self):
        result = runner.invoke(app, ["db", "init"])

        assert result.exit_code == 0
        assert "Database tables created" in result.output

    def test_ledger_empty(self):
        result = runner.invoke(app, ["db", "ledger"])

        assert result.exit_code == 0
        assert "No processed events" in result.output

    def test_ledger_lists_records(self, db_service, user):
        with db_service.session_scope() as db:
            IdempotencyGuard(db).check_and_reserve("ab" * 32, user.id, ProviderName.KEYCLOAK)

        result = runner.invoke(app, ["db", "ledger", "--limit", "5"])

        assert result.exit_code == 0
        assert "keycloak" in result.output
        assert "abababab" in result.output

    def test_link_identity(self, db_service):
        with db_service.session_scope() as db:
            bob = UserRepository(db).create(User(first_name="Bob", last_name="Builder"))

        result = runner.invoke(app, ["db", "link-identity", bob.id, "keycloak", "kc-bob"])

        assert result.exit_code == 0
        with db_service.session_scope() as db:
            found = UserStore(db).find_user_by_provider_subject(ProviderName.KEYCLOAK, "kc-bob")
        assert found.id == bob.id

    def test_link_identity_unknown_user(self):
        result = runner.invoke(app, ["db", "link-identity", "missing", "auth0", "auth0|x"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_link_identity_rejects_unknown_provider(self):
        result = runner.invoke(app, ["db", "link-identity", "u1", "okta", "x"])
        assert result.exit_code != 0


class TestWebhookCommands:
    def test_generate_secret(self):
        result = runner.invoke(app, ["webhooks", "generate-secret", "--length", "24"])

        assert result.exit_code == 0
        assert len(result.output.strip()) == 32

    def test_generate_secret_enforces_minimum_length(self):
        result = runner.invoke(app, ["webhooks", "generate-secret", "--length", "4"])
        assert result.exit_code != 0

    def test_providers(self):
        result = runner.invoke(app, ["webhooks", "providers"])

        assert result.exit_code == 0
        assert "AUTH0_WEBHOOK_SECRET" in result.output
        assert "KEYCLOAK_WEBHOOK_SECRET" in result.output
