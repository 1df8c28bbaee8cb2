"""
Tests for the sentiment error taxonomy.
"""

import pytest

from sentiment.exceptions import (
    AnalysisError,
    CacheError,
    EmbeddingError,
    ErrorSeverity,
    InitializationError,
    RateLimitError,
    SentimentError,
    VectorStoreError,
)


class TestDeclaredPolicies:
    """Each failure kind carries its own severity and retry policy."""

    @pytest.mark.parametrize("error_cls,severity,max_attempts,backoff_ms", [
        (InitializationError, ErrorSeverity.HIGH, 3, 1000),
        (EmbeddingError, ErrorSeverity.MEDIUM, 5, 500),
        (VectorStoreError, ErrorSeverity.MEDIUM, 3, 1000),
        (CacheError, ErrorSeverity.LOW, 2, 200),
        (AnalysisError, ErrorSeverity.MEDIUM, 3, 500),
    ])
    def test_policy(self, error_cls, severity, max_attempts, backoff_ms):
        error = error_cls("failed")
        assert error.severity == severity
        assert error.retry_policy.max_attempts == max_attempts
        assert error.retry_policy.backoff_ms == backoff_ms
        assert error.should_retry

    def test_rate_limit_uses_caller_delay(self):
        error = RateLimitError("slow down", retry_after_ms=2500)
        assert error.severity == ErrorSeverity.LOW
        assert error.retry_policy.max_attempts == 1
        assert error.retry_policy.backoff_ms == 2500
        assert error.retry_after_ms == 2500

    def test_all_are_sentiment_errors(self):
        for error_cls in (InitializationError, EmbeddingError, VectorStoreError, CacheError, AnalysisError):
            assert issubclass(error_cls, SentimentError)
        assert isinstance(RateLimitError("x", retry_after_ms=1), SentimentError)

    def test_backoff_doubles(self):
        policy = EmbeddingError("x").retry_policy
        assert [policy.delay_ms(n) for n in (1, 2, 3)] == [500, 1000, 2000]


class TestErrorDetails:
    """Cause chaining and serialization."""

    def test_cause_is_chained(self):
        cause = ConnectionError("reset")
        error = VectorStoreError("query failed", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_to_dict(self):
        error = CacheError("write failed", cause=OSError("disk full"), details={"hash": "abc"})
        data = error.to_dict()

        assert data["error_type"] == "CacheError"
        assert data["code"] == "CACHE_ERROR"
        assert data["severity"] == "low"
        assert data["message"] == "write failed"
        assert data["details"] == {"hash": "abc"}
        assert data["retry_policy"] == {"max_attempts": 2, "backoff_ms": 200}
        assert data["cause_type"] == "OSError"
        assert data["cause_message"] == "disk full"

    def test_rate_limit_to_dict(self):
        data = RateLimitError("slow", retry_after_ms=100).to_dict()
        assert data["retry_after_ms"] == 100
        assert data["code"] == "RATE_LIMIT_ERROR"
