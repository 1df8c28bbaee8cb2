"""
Sentiment Cache Repository.

Point lookups by hash, insert-or-replace, and bulk delete of expired
rows for the ``sentiment_cache`` table.
"""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storage.models.sentiment_cache import SentimentCacheRecord
from storage.repositories.base import BaseRepository


class SentimentCacheRepository(BaseRepository[SentimentCacheRecord]):
    """Data access for cached sentiment analyses."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SentimentCacheRecord, "SentimentCacheRepository")

    async def get_valid(
        self,
        message_hash: str,
        now_ms: int,
    ) -> Optional[SentimentCacheRecord]:
        """
        Get an unexpired row by hash.

        Args:
            message_hash: SHA-256 hex digest of the message key
            now_ms: Current epoch milliseconds

        Returns:
            The row, or None if absent or expired
        """
        stmt = select(SentimentCacheRecord).where(
            SentimentCacheRecord.message_hash == message_hash,
            SentimentCacheRecord.expires_at > now_ms,
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get_valid", {"message_hash": message_hash})
        return result.scalar_one_or_none()

    async def save(self, record: SentimentCacheRecord) -> SentimentCacheRecord:
        """
        Insert a row, replacing any previous row with the same hash.

        An expired row for the same text is overwritten rather than
        tripping the primary key.
        """
        try:
            merged = await self._session.merge(record)
            await self._session.flush()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "save", {"message_hash": record.message_hash})
        self._logger.debug(f"Cached sentiment {record.message_hash[:12]}")
        return merged

    async def delete_expired(self, now_ms: int) -> int:
        """
        Delete every row whose expiry is at or before ``now_ms``.

        Returns:
            Number of rows deleted
        """
        stmt = delete(SentimentCacheRecord).where(
            SentimentCacheRecord.expires_at <= now_ms
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "delete_expired", {"now_ms": now_ms})
        return result.rowcount or 0

    async def count(self) -> int:
        stmt = select(func.count()).select_from(SentimentCacheRecord)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "count")
        return int(result.scalar_one())
