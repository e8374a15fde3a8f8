"""Entities organized by business concept.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.processed_event import (
    ProcessedEventRecord,
    ProcessedEventRepository,
    ProcessedEventTable,
)
from .core.user import User, UserRepository, UserTable
from .core.user_identity import UserIdentity, UserIdentityRepository, UserIdentityTable

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
    "UserIdentity",
    "UserIdentityTable",
    "UserIdentityRepository",
    "ProcessedEventRecord",
    "ProcessedEventTable",
    "ProcessedEventRepository",
]
