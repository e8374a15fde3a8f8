"""Processed event ledger: one record per applied provider event."""

from .entity import ProcessedEventRecord
from .repository import ProcessedEventRepository
from .table import ProcessedEventTable

__all__ = ["ProcessedEventRecord", "ProcessedEventTable", "ProcessedEventRepository"]
