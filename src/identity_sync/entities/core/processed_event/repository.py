"""Processed event ledger repository."""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.identity_sync.entities.core.processed_event.entity import ProcessedEventRecord
from src.identity_sync.entities.core.processed_event.table import ProcessedEventTable


class ProcessedEventRepository:
    """Data-access layer for the processed event ledger."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def reserve(self, record: ProcessedEventRecord) -> bool:
        """Insert ``record`` unless its fingerprint is already in the ledger.

        The insert is flushed immediately so the unique constraint decides the
        outcome. On conflict the session's transaction is rolled back, so this
        must be the first write of the unit of work.

        Returns:
            True if the record was inserted, False if the fingerprint exists.
        """
        self._session.add(ProcessedEventTable.model_validate(record, from_attributes=True))
        try:
            self._session.flush()
        except IntegrityError:
            self._session.rollback()
            return False
        return True

    def get_by_fingerprint(self, fingerprint: str) -> ProcessedEventRecord | None:
        statement = select(ProcessedEventTable).where(
            ProcessedEventTable.fingerprint == fingerprint
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return ProcessedEventRecord.model_validate(row, from_attributes=True)

    def list_recent(self, limit: int = 50) -> list[ProcessedEventRecord]:
        statement = (
            select(ProcessedEventTable)
            .order_by(col(ProcessedEventTable.processed_at).desc())
            .limit(limit)
        )
        return [
            ProcessedEventRecord.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        ]

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(ProcessedEventTable)).one()
