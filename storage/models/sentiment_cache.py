"""
Sentiment Cache ORM Model.

One row per analyzed message body, keyed by the SHA-256 of its text
(optionally salted with the room id).
"""

from typing import Any

from sqlalchemy import JSON, BigInteger, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SentimentCacheRecord(Base):
    """
    Cached sentiment analysis.

    Retention: until expires_at (default 24h after creation)
    """
    __tablename__ = "sentiment_cache"

    message_hash: Mapped[str] = mapped_column(String(64), primary_key=True)

    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    sentiment: Mapped[float] = mapped_column(Float, nullable=False)  # -1.0 to 1.0
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    context: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    user_id: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    room_id: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    sender_name: Mapped[str] = mapped_column(String(128), nullable=False, default="Unknown")

    # Epoch milliseconds
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expires_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_sentiment_cache_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<SentimentCacheRecord hash={self.message_hash[:12]} "
            f"category={self.category} expires_at={self.expires_at}>"
        )
