"""
Sentiment Analysis Exceptions - Closed, severity-tagged error taxonomy.

Every failure kind declares its own severity and retry policy:

    Kind             Severity   Retry
    ---------------  ---------  -------------------------
    Initialization   HIGH       3 x 1000ms
    Embedding        MEDIUM     5 x 500ms
    VectorStore      MEDIUM     3 x 1000ms
    Cache            LOW        2 x 200ms
    Analysis         MEDIUM     3 x 500ms
    RateLimit        LOW        1 x caller-specified delay

Backoff is pure exponential: backoff_ms * 2 ** (attempt - 1).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from .models import RetryPolicy


class ErrorCode(Enum):
    """Failure kind identifiers."""
    INITIALIZATION = "INIT_ERROR"
    EMBEDDING = "EMBEDDING_ERROR"
    VECTOR_STORE = "VECTOR_STORE_ERROR"
    CACHE = "CACHE_ERROR"
    ANALYSIS = "ANALYSIS_ERROR"
    RATE_LIMIT = "RATE_LIMIT_ERROR"


class ErrorSeverity(Enum):
    """Severity levels for alerting."""
    LOW = "low"            # minor, processing continues
    MEDIUM = "medium"      # significant but recoverable
    HIGH = "high"          # needs immediate attention
    CRITICAL = "critical"  # service cannot function


class SentimentError(Exception):
    """Base exception for all sentiment analysis errors."""

    code: ErrorCode = ErrorCode.ANALYSIS
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    retryable: bool = True
    default_retry_policy: Optional[RetryPolicy] = None

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        retry_policy: Optional[RetryPolicy] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.cause = cause
        self.retry_policy = retry_policy or self.default_retry_policy
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def should_retry(self) -> bool:
        return self.retryable and self.retry_policy is not None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.retry_policy is not None:
            data["retry_policy"] = {
                "max_attempts": self.retry_policy.max_attempts,
                "backoff_ms": self.retry_policy.backoff_ms,
            }
        if self.cause is not None:
            data["cause_type"] = type(self.cause).__name__
            data["cause_message"] = str(self.cause)
        return data


class InitializationError(SentimentError):
    """Reference-embedding warm-up failed."""
    code = ErrorCode.INITIALIZATION
    severity = ErrorSeverity.HIGH
    default_retry_policy = RetryPolicy(max_attempts=3, backoff_ms=1000)


class EmbeddingError(SentimentError):
    """Embedding provider failed to produce a vector."""
    code = ErrorCode.EMBEDDING
    severity = ErrorSeverity.MEDIUM
    default_retry_policy = RetryPolicy(max_attempts=5, backoff_ms=500)


class VectorStoreError(SentimentError):
    """Similarity query or upsert failed."""
    code = ErrorCode.VECTOR_STORE
    severity = ErrorSeverity.MEDIUM
    default_retry_policy = RetryPolicy(max_attempts=3, backoff_ms=1000)


class CacheError(SentimentError):
    """Durable sentiment cache read/write failed."""
    code = ErrorCode.CACHE
    severity = ErrorSeverity.LOW
    default_retry_policy = RetryPolicy(max_attempts=2, backoff_ms=200)


class AnalysisError(SentimentError):
    """Generic analysis failure; also wraps exhausted or non-retryable errors."""
    code = ErrorCode.ANALYSIS
    severity = ErrorSeverity.MEDIUM
    default_retry_policy = RetryPolicy(max_attempts=3, backoff_ms=500)


class RateLimitError(SentimentError):
    """Upstream provider asked us to slow down."""
    code = ErrorCode.RATE_LIMIT
    severity = ErrorSeverity.LOW

    def __init__(
        self,
        message: str,
        retry_after_ms: int,
        cause: Optional[BaseException] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            cause=cause,
            retry_policy=RetryPolicy(max_attempts=1, backoff_ms=retry_after_ms),
            details=details,
        )
        self.retry_after_ms = retry_after_ms

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["retry_after_ms"] = self.retry_after_ms
        return data
