"""
Storage Package.

Durable persistence for the sentiment service.

Modules:
- database: Async engine, sessions and transactions
- models/: ORM models
- repositories/: Data access layer
"""

from .database import (
    Database,
    DatabaseConnectionError,
    DatabaseInitializationError,
    DatabasePersistenceError,
    get_database_url,
)
from .models import Base, SentimentCacheRecord
from .repositories import SentimentCacheRepository


__all__ = [
    "Base",
    "Database",
    "DatabaseConnectionError",
    "DatabaseInitializationError",
    "DatabasePersistenceError",
    "SentimentCacheRecord",
    "SentimentCacheRepository",
    "get_database_url",
]
