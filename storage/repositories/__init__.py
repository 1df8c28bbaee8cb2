"""
Repository Layer Package.

The only gateway to persistent storage. Sessions are injected, and all
database errors are wrapped in repository exceptions.

- SentimentCacheRepository: content-addressed sentiment cache rows
"""

from .base import BaseRepository
from .exceptions import QueryError, RepositoryConnectionError, RepositoryException
from .sentiment_cache import SentimentCacheRepository


__all__ = [
    "BaseRepository",
    "QueryError",
    "RepositoryConnectionError",
    "RepositoryException",
    "SentimentCacheRepository",
]
