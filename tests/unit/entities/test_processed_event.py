"""Unit tests for the processed event ledger."""

from datetime import timedelta

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.entities.core.processed_event import (
    ProcessedEventRecord,
    ProcessedEventRepository,
)
from tests.fixtures.core import ts

T0 = ts("2024-05-01T12:00:00+00:00")


def record(fingerprint: str, user_id: str, minutes: int = 0) -> ProcessedEventRecord:
    return ProcessedEventRecord(
        fingerprint=fingerprint,
        user_id=user_id,
        provider=ProviderName.AUTH0,
        processed_at=T0 + timedelta(minutes=minutes),
    )


class TestProcessedEventRepository:
    def test_reserve_new_fingerprint(self, session, user):
        repo = ProcessedEventRepository(session)

        assert repo.reserve(record("a" * 64, user.id)) is True
        assert repo.get_by_fingerprint("a" * 64).user_id == user.id

    def test_reserve_existing_fingerprint(self, session, user):
        repo = ProcessedEventRepository(session)
        repo.reserve(record("a" * 64, user.id))
        session.commit()

        assert repo.reserve(record("a" * 64, user.id, minutes=1)) is False
        assert repo.count() == 1

    def test_list_recent_newest_first(self, session, user):
        repo = ProcessedEventRepository(session)
        for minutes, char in enumerate("abc"):
            repo.reserve(record(char * 64, user.id, minutes=minutes))

        recent = repo.list_recent(limit=2)

        assert [r.fingerprint[0] for r in recent] == ["c", "b"]

    def test_get_missing_fingerprint(self, session):
        assert ProcessedEventRepository(session).get_by_fingerprint("0" * 64) is None
