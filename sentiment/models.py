"""
Sentiment Data Models - Scores, context, cache entries and vector results.

All result types are immutable; they are created once per analysis and
handed to observers and callers as-is.

score:       -1.0 (strongly bearish) to +1.0 (strongly bullish)
confidence:   0.0 to 1.0 (clamped by default)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


Embedding = list[float]


class SentimentCategory(Enum):
    """Five ordered sentiment bins."""
    STRONGLY_BEARISH = "strongly_bearish"
    MILDLY_BEARISH = "mildly_bearish"
    NEUTRAL = "neutral"
    MILDLY_BULLISH = "mildly_bullish"
    STRONGLY_BULLISH = "strongly_bullish"

    @classmethod
    def parse(cls, value: Any) -> Optional["SentimentCategory"]:
        """Lenient lookup used for vector-store metadata; None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class SentimentScore:
    """Output of a scoring strategy for one message."""
    score: float
    category: SentimentCategory
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "category": self.category.value,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class AnalysisContext:
    """Trend and volatility over a message's nearest prior neighbours."""
    recent_trend: float   # -1.0 to 1.0
    volatility: float     # 0.0 to 1.0
    dominant_category: SentimentCategory

    def to_dict(self) -> dict[str, Any]:
        return {
            "recent_trend": self.recent_trend,
            "volatility": self.volatility,
            "dominant_category": self.dominant_category.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisContext":
        return cls(
            recent_trend=float(data["recent_trend"]),
            volatility=float(data["volatility"]),
            dominant_category=SentimentCategory(data["dominant_category"]),
        )


@dataclass(frozen=True)
class SentimentAnalysisResult:
    """Score plus context for a single analyzed message."""
    score: SentimentScore
    context: AnalysisContext
    cached: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score.to_dict(),
            "context": self.context.to_dict(),
            "cached": self.cached,
        }


@dataclass(frozen=True)
class AnalysisRequestContext:
    """Caller-supplied identity attached to cache entries."""
    user_id: str
    room_id: str
    sender_name: str = "Unknown"


@dataclass(frozen=True)
class CacheEntry:
    """
    One content-addressed cache row.

    Keyed by the SHA-256 of the message text, so identical bodies from
    different senders share one entry unless room keying is enabled.
    """
    message_hash: str
    embedding: Embedding
    sentiment: float
    category: SentimentCategory
    confidence: float
    context: AnalysisContext
    user_id: str
    room_id: str
    sender_name: str
    created_at: int  # epoch ms
    expires_at: int  # epoch ms

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at

    def to_result(self) -> SentimentAnalysisResult:
        return SentimentAnalysisResult(
            score=SentimentScore(
                score=self.sentiment,
                category=self.category,
                confidence=self.confidence,
            ),
            context=self.context,
            cached=True,
        )


@dataclass(frozen=True)
class VectorMatch:
    """A single nearest-neighbour hit."""
    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VectorQueryResult:
    """Ranked matches from a similarity query."""
    matches: list[VectorMatch] = field(default_factory=list)


@dataclass(frozen=True)
class VectorRecord:
    """A vector to upsert into the similarity store."""
    id: str
    values: Embedding
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RetryPolicy:
    """Declared (max attempts, base backoff) pair for one failure kind."""
    max_attempts: int
    backoff_ms: int

    def delay_ms(self, attempt: int) -> int:
        """Pure exponential backoff for a 1-based attempt number."""
        return self.backoff_ms * (2 ** (attempt - 1))


@dataclass
class RecoveryResult:
    """Outcome of a recovery run."""
    success: bool
    error: Optional[BaseException] = None
    result: Any = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def attempts(self) -> int:
        return int(self.metadata.get("attempts", 0))


@dataclass(frozen=True)
class WindowSentiment:
    """Aggregate sentiment of one processed message window."""
    window_id: str
    chat_id: str
    score: float
    category: SentimentCategory
    confidence: float
    trends: list[SentimentCategory]
    message_count: int
    results: list[SentimentAnalysisResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "window_id": self.window_id,
            "chat_id": self.chat_id,
            "score": self.score,
            "category": self.category.value,
            "confidence": self.confidence,
            "trends": [c.value for c in self.trends],
            "message_count": self.message_count,
        }
