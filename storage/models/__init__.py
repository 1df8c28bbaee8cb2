"""
Storage Models Package.

ORM models for the sentiment service database.

- base.py: Declarative base
- sentiment_cache.py: Content-addressed sentiment cache rows
"""

from .base import Base
from .sentiment_cache import SentimentCacheRecord


__all__ = [
    "Base",
    "SentimentCacheRecord",
]
