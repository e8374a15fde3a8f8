"""Two sessions racing on a file-backed database."""

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.identity_sync.core.models.identity import MfaType, ProviderName
from src.identity_sync.core.services import UserStore, WebhookDispatcher
from src.identity_sync.core.services.webhooks import (
    IdempotencyGuard,
    IdentityStateApplier,
    ReservationStatus,
    WebhookStatus,
    build_normalizers,
)
from src.identity_sync.entities.core.processed_event import ProcessedEventRepository
from src.identity_sync.entities.core.user import UserRepository
from tests.fixtures.core import KEYCLOAK_SUBJECT, seed_user
from tests.fixtures.webhooks import KEYCLOAK_SECRET, RecordingNotifier, as_body

FINGERPRINT = "c" * 64
T_ENROLL = 1714566600000
T_REMOVE = T_ENROLL + 60_000


@pytest.fixture
def alice(file_db_service):
    return seed_user(file_db_service)


def keycloak_event(kind: str, time_ms: int) -> dict:
    return {"type": kind, "userId": KEYCLOAK_SUBJECT, "time": time_ms, "details": {}}


class TestConcurrentDelivery:
    def test_older_event_resolved_first_never_overwrites_newer_commit(
        self, file_db_service, alice, webhook_secrets
    ):
        """Session B resolves an older enrollment, then session A commits a newer removal."""
        normalizer = build_normalizers()[ProviderName.KEYCLOAK]
        older = normalizer.normalize(as_body(keycloak_event("UPDATE_TOTP", T_ENROLL)))

        db_b = file_db_service.get_session()
        db_a = file_db_service.get_session()
        try:
            applier_b = IdentityStateApplier(UserStore(db_b))
            resolved_b = applier_b.resolve(older)
            assert resolved_b.last_identity_sync_at is None

            newer = WebhookDispatcher(
                db_session=db_a,
                normalizers=build_normalizers(),
                secrets=webhook_secrets,
                notifier=RecordingNotifier(),
            ).handle(
                "keycloak", KEYCLOAK_SECRET, as_body(keycloak_event("REMOVE_TOTP", T_REMOVE))
            )
            assert newer.status is WebhookStatus.APPLIED

            reservation = IdempotencyGuard(db_b).check_and_reserve(
                older.fingerprint, resolved_b.id, older.provider
            )
            assert reservation is ReservationStatus.RESERVED
            snapshot = applier_b.apply(older, user=resolved_b)
            db_b.commit()
        finally:
            db_a.close()
            db_b.close()

        assert snapshot.mfa_type is MfaType.NONE
        with file_db_service.session_scope() as db:
            stored = UserRepository(db).get(alice.id)
            assert ProcessedEventRepository(db).count() == 2

        assert stored.mfa_type is MfaType.NONE
        assert stored.mfa_enabled_at is None
        assert stored.last_identity_sync_fingerprint == newer.fingerprint

    def test_simultaneous_reservations_have_one_winner(self, file_db_service, alice):
        """The second reservation waits on the first writer, then sees its row."""
        first = file_db_service.get_session()

        def reserve_in_other_session() -> ReservationStatus:
            with file_db_service.session_scope() as db:
                return IdempotencyGuard(db).check_and_reserve(
                    FINGERPRINT, alice.id, ProviderName.AUTH0
                )

        try:
            assert (
                IdempotencyGuard(first).check_and_reserve(
                    FINGERPRINT, alice.id, ProviderName.AUTH0
                )
                is ReservationStatus.RESERVED
            )

            with ThreadPoolExecutor(max_workers=1) as pool:
                pending = pool.submit(reserve_in_other_session)
                time.sleep(0.2)
                assert not pending.done()

                first.commit()
                second = pending.result(timeout=10)
        finally:
            first.close()

        assert second is ReservationStatus.ALREADY_PROCESSED
        with file_db_service.session_scope() as db:
            assert ProcessedEventRepository(db).count() == 1
