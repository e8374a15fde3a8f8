"""Idempotency guard backed by the processed event ledger."""

from enum import Enum

from sqlmodel import Session

from src.identity_sync.core.models.identity import ProviderName
from src.identity_sync.entities.core.processed_event import (
    ProcessedEventRecord,
    ProcessedEventRepository,
)


class ReservationStatus(str, Enum):
    RESERVED = "reserved"
    ALREADY_PROCESSED = "already_processed"


class IdempotencyGuard:
    """Claims an event fingerprint exactly once.

    The claim is an insert against the ledger's unique fingerprint constraint,
    never a lookup followed by an insert, so concurrent duplicate deliveries
    (even across process instances) resolve to a single winner. The insert
    joins the caller's transaction with no savepoint: if the caller rolls back,
    the claim goes with it, and a conflict rolls back the caller's whole
    transaction. Reserve before any other write.
    """

    def __init__(self, db_session: Session):
        self._ledger = ProcessedEventRepository(db_session)

    def check_and_reserve(
        self, fingerprint: str, user_id: str, provider: ProviderName
    ) -> ReservationStatus:
        record = ProcessedEventRecord(
            fingerprint=fingerprint, user_id=user_id, provider=provider
        )
        if self._ledger.reserve(record):
            return ReservationStatus.RESERVED
        return ReservationStatus.ALREADY_PROCESSED
