"""
Sentiment Cache - Content-addressed, TTL-bound store of past analyses.

Entries are keyed by SHA-256 of the message text. Two identical message
bodies share one entry regardless of sender; set ``key_by_room`` to
scope entries per room instead.

Reads never raise (a failed lookup is a miss). Writes and cleanup raise
CacheError so that the caller can choose to log and move on.
"""

import hashlib
import logging
from typing import Optional

from core.clock import ClockFactory, ClockProtocol
from storage.database import Database, DatabasePersistenceError
from storage.models.sentiment_cache import SentimentCacheRecord
from storage.repositories.exceptions import RepositoryException
from storage.repositories.sentiment_cache import SentimentCacheRepository

from .exceptions import CacheError
from .models import (
    AnalysisContext,
    AnalysisRequestContext,
    CacheEntry,
    Embedding,
    SentimentCategory,
    SentimentScore,
)


logger = logging.getLogger(__name__)


class SentimentCache:
    """
    Durable sentiment cache backed by the ``sentiment_cache`` table.

    Usage:
        cache = SentimentCache(database, ttl_seconds=86400)
        entry = await cache.get("wagmi")
        if entry is None:
            ...
            await cache.store("wagmi", embedding, score, context, request)
    """

    DEFAULT_TTL_SECONDS = 24 * 60 * 60

    def __init__(
        self,
        database: Database,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_by_room: bool = False,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        self._database = database
        self.ttl_ms = int(ttl_seconds * 1000)
        self.key_by_room = key_by_room
        self._clock = clock or ClockFactory.get_clock()

        self._stats = {
            "hits": 0,
            "misses": 0,
            "writes": 0,
            "read_errors": 0,
        }

    def hash_message(self, text: str, room_id: Optional[str] = None) -> str:
        """Cache key for a message body (room-salted when key_by_room is set)."""
        key = text
        if self.key_by_room and room_id is not None:
            key = f"{room_id}\0{text}"
        return hashlib.sha256(key.encode("utf-8")).hexdigest()

    async def get(self, text: str, room_id: Optional[str] = None) -> Optional[CacheEntry]:
        """
        Look up an unexpired entry for ``text``.

        Returns None on a miss, an expired entry, or a storage failure.
        """
        message_hash = self.hash_message(text, room_id)
        now = self._clock.now_ms()

        try:
            async with self._database.session() as session:
                record = await SentimentCacheRepository(session).get_valid(message_hash, now)
        except (RepositoryException, DatabasePersistenceError) as e:
            self._stats["read_errors"] += 1
            logger.error(f"Error retrieving cached sentiment {message_hash[:12]}: {e}")
            return None

        if record is None:
            self._stats["misses"] += 1
            return None

        entry = self._to_entry(record)
        if entry is None or entry.is_expired(now):
            self._stats["misses"] += 1
            return None

        self._stats["hits"] += 1
        return entry

    async def store(
        self,
        text: str,
        embedding: Embedding,
        score: SentimentScore,
        context: AnalysisContext,
        request: AnalysisRequestContext,
    ) -> CacheEntry:
        """
        Persist an analysis with a fresh TTL.

        Raises:
            CacheError: If the write fails
        """
        now = self._clock.now_ms()
        entry = CacheEntry(
            message_hash=self.hash_message(text, request.room_id),
            embedding=list(embedding),
            sentiment=score.score,
            category=score.category,
            confidence=score.confidence,
            context=context,
            user_id=request.user_id,
            room_id=request.room_id,
            sender_name=request.sender_name or "Unknown",
            created_at=now,
            expires_at=now + self.ttl_ms,
        )

        try:
            async with self._database.transaction_scope() as session:
                await SentimentCacheRepository(session).save(self._to_record(entry))
        except (RepositoryException, DatabasePersistenceError) as e:
            raise CacheError(
                f"Failed to cache sentiment {entry.message_hash[:12]}",
                cause=e,
            ) from e

        self._stats["writes"] += 1
        logger.debug(f"Sentiment cached successfully: {entry.message_hash[:12]}")
        return entry

    async def cleanup(self) -> int:
        """
        Delete all expired entries.

        Raises:
            CacheError: If the delete fails
        """
        now = self._clock.now_ms()
        try:
            async with self._database.transaction_scope() as session:
                deleted = await SentimentCacheRepository(session).delete_expired(now)
        except (RepositoryException, DatabasePersistenceError) as e:
            raise CacheError("Failed to clean up sentiment cache", cause=e) from e

        if deleted:
            logger.info(f"Removed {deleted} expired sentiment cache entries")
        return deleted

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)

    @staticmethod
    def _to_record(entry: CacheEntry) -> SentimentCacheRecord:
        return SentimentCacheRecord(
            message_hash=entry.message_hash,
            embedding=entry.embedding,
            sentiment=entry.sentiment,
            category=entry.category.value,
            confidence=entry.confidence,
            context=entry.context.to_dict(),
            user_id=entry.user_id,
            room_id=entry.room_id,
            sender_name=entry.sender_name,
            created_at=entry.created_at,
            expires_at=entry.expires_at,
        )

    @staticmethod
    def _to_entry(record: SentimentCacheRecord) -> Optional[CacheEntry]:
        try:
            return CacheEntry(
                message_hash=record.message_hash,
                embedding=list(record.embedding or []),
                sentiment=float(record.sentiment),
                category=SentimentCategory(record.category),
                confidence=float(record.confidence),
                context=AnalysisContext.from_dict(record.context),
                user_id=record.user_id,
                room_id=record.room_id,
                sender_name=record.sender_name,
                created_at=int(record.created_at),
                expires_at=int(record.expires_at),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed cache row {record.message_hash[:12]}: {e}")
            return None
