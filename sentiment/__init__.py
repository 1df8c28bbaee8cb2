"""
Sentiment Analysis - Lexical scoring with similarity context, caching
and recovery.

This package provides:
- SentimentAnalysisService: per-message analysis entry point
- LexicalSentimentStrategy: default anchor-term scoring strategy
- ContextAggregator: trend / volatility over similar past messages
- SentimentCache: content-addressed TTL cache in SQL storage
- ErrorRecovery: exponential-backoff retries per error kind
- WindowSentimentPipeline: message-window handler

Usage:
    from sentiment import (
        AnalysisRequestContext,
        InMemoryVectorStore,
        OpenAIEmbeddingProvider,
        SentimentAnalysisService,
        SentimentCache,
    )

    service = SentimentAnalysisService(
        OpenAIEmbeddingProvider(config.embedding),
        InMemoryVectorStore(),
        SentimentCache(database),
    )
    result = await service.analyze_sentiment(
        "wagmi 🚀",
        AnalysisRequestContext(user_id="u1", room_id="chat-1"),
    )
    print(result.score.category.value, result.context.recent_trend)

Output Schema:
- score: -1.0 (strongly bearish) to +1.0 (strongly bullish)
- confidence: 0.0 to 1.0
- category: strongly_bearish | mildly_bearish | neutral |
  mildly_bullish | strongly_bullish
"""

from .cache import SentimentCache
from .config import (
    AnalysisConfig,
    CacheConfig,
    EmbeddingConfig,
    SentimentConfig,
    VectorStoreConfig,
    get_config,
    set_config,
)
from .context import (
    ContextAggregator,
    calculate_trend,
    calculate_volatility,
    dominant_category,
)
from .exceptions import (
    AnalysisError,
    CacheError,
    EmbeddingError,
    ErrorCode,
    ErrorSeverity,
    InitializationError,
    RateLimitError,
    SentimentError,
    VectorStoreError,
)
from .lexicon import DEFAULT_LEXICON, SentimentLexicon
from .lru import LRUCache
from .models import (
    AnalysisContext,
    AnalysisRequestContext,
    CacheEntry,
    Embedding,
    RecoveryResult,
    RetryPolicy,
    SentimentAnalysisResult,
    SentimentCategory,
    SentimentScore,
    VectorMatch,
    VectorQueryResult,
    VectorRecord,
    WindowSentiment,
)
from .pipeline import WindowSentimentPipeline
from .providers import (
    EmbeddingProvider,
    InMemoryVectorStore,
    OpenAIEmbeddingProvider,
    PineconeVectorStore,
    VectorStore,
    create_embedding_provider,
    create_vector_store,
)
from .recovery import ErrorRecovery
from .scoring import (
    AnalysisStrategy,
    CategoryThresholds,
    LexicalSentimentStrategy,
    calculate_emphasis_multiplier,
    categorize,
)
from .service import SentimentAnalysisService, SentimentObserver, ServiceState


__all__ = [
    # Service
    "SentimentAnalysisService",
    "SentimentObserver",
    "ServiceState",
    "WindowSentimentPipeline",

    # Scoring & context
    "AnalysisStrategy",
    "LexicalSentimentStrategy",
    "CategoryThresholds",
    "calculate_emphasis_multiplier",
    "categorize",
    "ContextAggregator",
    "calculate_trend",
    "calculate_volatility",
    "dominant_category",
    "SentimentLexicon",
    "DEFAULT_LEXICON",

    # Caching & recovery
    "SentimentCache",
    "LRUCache",
    "ErrorRecovery",

    # Providers
    "EmbeddingProvider",
    "VectorStore",
    "OpenAIEmbeddingProvider",
    "PineconeVectorStore",
    "InMemoryVectorStore",
    "create_embedding_provider",
    "create_vector_store",

    # Config
    "SentimentConfig",
    "CacheConfig",
    "AnalysisConfig",
    "EmbeddingConfig",
    "VectorStoreConfig",
    "get_config",
    "set_config",

    # Models
    "Embedding",
    "SentimentCategory",
    "SentimentScore",
    "AnalysisContext",
    "SentimentAnalysisResult",
    "AnalysisRequestContext",
    "CacheEntry",
    "VectorMatch",
    "VectorQueryResult",
    "VectorRecord",
    "RetryPolicy",
    "RecoveryResult",
    "WindowSentiment",

    # Exceptions
    "SentimentError",
    "InitializationError",
    "EmbeddingError",
    "VectorStoreError",
    "CacheError",
    "AnalysisError",
    "RateLimitError",
    "ErrorCode",
    "ErrorSeverity",
]


# Version
__version__ = "1.0.0"
