"""Tests for the webhook HTTP endpoints."""

from src.identity_sync.core.models.identity import MfaType
from tests.fixtures.core import AUTH0_SUBJECT, KEYCLOAK_SUBJECT
from tests.fixtures.webhooks import AUTH0_SECRET, KEYCLOAK_SECRET, as_body

URL = "/webhooks/{}/user-update"


class TestWebhookRouter:
    def test_applied(self, client, user, fetch_user, auth0_mfa_enrolled):
        response = client.post(
            URL.format("auth0"),
            content=as_body(auth0_mfa_enrolled),
            headers={"x-webhook-secret": AUTH0_SECRET, "content-type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "applied"
        assert fetch_user(user.id).mfa_type is MfaType.TOTP

    def test_missing_secret(self, client, user, fetch_user, auth0_mfa_enrolled):
        response = client.post(URL.format("auth0"), content=as_body(auth0_mfa_enrolled))

        assert response.status_code == 401
        assert response.json()["status"] == "unauthorized"
        assert fetch_user(user.id).mfa_type is MfaType.NONE

    def test_body_never_echoes_the_secret(self, client, auth0_mfa_enrolled):
        response = client.post(
            URL.format("auth0"),
            content=as_body(auth0_mfa_enrolled),
            headers={"x-webhook-secret": "wrong-but-sensitive"},
        )

        assert "wrong-but-sensitive" not in response.text

    def test_unknown_subject_is_202(self, client, user, auth0_mfa_enrolled):
        body = {**auth0_mfa_enrolled, "user_id": "auth0|unknown"}

        response = client.post(
            URL.format("auth0"),
            content=as_body(body),
            headers={"x-webhook-secret": AUTH0_SECRET},
        )

        assert response.status_code == 202
        assert response.json()["status"] == "unknown_subject"

    def test_replay_returns_duplicate(self, client, user, auth0_mfa_enrolled):
        kwargs = {
            "content": as_body(auth0_mfa_enrolled),
            "headers": {"x-webhook-secret": AUTH0_SECRET},
        }

        first = client.post(URL.format("auth0"), **kwargs)
        second = client.post(URL.format("auth0"), **kwargs)

        assert first.json()["status"] == "applied"
        assert second.status_code == 200
        assert second.json()["status"] == "duplicate"

    def test_malformed_is_400(self, client):
        response = client.post(
            URL.format("auth0"),
            content=b"not json at all",
            headers={"x-webhook-secret": AUTH0_SECRET},
        )

        assert response.status_code == 400
        assert response.json() == {
            "status": "malformed",
            "detail": "Malformed webhook payload",
            "request_id": None,
        }

    def test_unknown_provider_is_404(self, client):
        response = client.post(
            URL.format("okta"), content=b"{}", headers={"x-webhook-secret": AUTH0_SECRET}
        )

        assert response.status_code == 404
        assert response.json()["status"] == "unknown_provider"


class TestHealthRouter:
    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_lists_providers(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["checks"]["database"]["status"] == "healthy"
        assert body["checks"]["webhook_providers"] == ["auth0", "keycloak"]

    def test_readiness_reports_unhealthy_database(self, client, app_dependencies, monkeypatch):
        monkeypatch.setattr(app_dependencies.database_service, "health_check", lambda: False)

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_post_login_action_body_is_accepted_on_both_routes(self, client, user, fetch_user):
        action_body = {
            "user_id": AUTH0_SUBJECT,
            "email": "alice@example.com",
            "email_verified": True,
            "mfa_enabled": True,
            "mfa_type": "otp",
        }

        auth0 = client.post(
            URL.format("auth0"),
            content=as_body(action_body),
            headers={"x-webhook-secret": AUTH0_SECRET},
        )
        keycloak = client.post(
            URL.format("keycloak"),
            content=as_body({**action_body, "user_id": KEYCLOAK_SUBJECT}),
            headers={"x-webhook-secret": KEYCLOAK_SECRET},
        )

        assert auth0.status_code == 200
        assert auth0.json()["status"] == "applied"
        assert keycloak.status_code == 200
        assert keycloak.json()["status"] == "applied"

        stored = fetch_user(user.id)
        assert stored.mfa_type is MfaType.TOTP
        assert stored.email_verified is True
