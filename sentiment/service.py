"""
Sentiment Analysis Service - Orchestrates scoring, context and caching.

Per call:
1. Exact-text cache lookup; a hit skips everything below
2. Embed the message (with recovery)
3. Score with the active strategy
4. Query the vector store for the k nearest prior messages (with recovery)
5. Aggregate trend, volatility and dominant category
6. Persist the cache entry and index the vector in the background
7. Notify observers, in registration order

State machine: UNINITIALIZED -> INITIALIZING -> READY. Initialization
embeds every lexicon anchor term once and keeps the vectors in a bounded
recency cache.

Failure policy:
- Embedding and vector-store failures get one recovery run, then raise
  EmbeddingError / VectorStoreError unchanged
- Any other failure is raised as AnalysisError with the cause chained
- Background persistence failures are logged at DEBUG and never surface
- A failing observer never blocks other observers or the result
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Coroutine, Optional, Protocol, runtime_checkable

from .cache import SentimentCache
from .config import SentimentConfig
from .context import ContextAggregator
from .exceptions import (
    AnalysisError,
    EmbeddingError,
    InitializationError,
    RateLimitError,
    SentimentError,
    VectorStoreError,
)
from .lexicon import SentimentLexicon
from .lru import LRUCache
from .models import (
    AnalysisContext,
    AnalysisRequestContext,
    Embedding,
    SentimentAnalysisResult,
    SentimentScore,
    VectorQueryResult,
    VectorRecord,
)
from .providers.base import EmbeddingProvider, VectorStore
from .recovery import ErrorFactory, ErrorRecovery
from .scoring import AnalysisStrategy, LexicalSentimentStrategy


logger = logging.getLogger(__name__)


class ServiceState(Enum):
    """Lifecycle of the analysis service."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


@runtime_checkable
class SentimentObserver(Protocol):
    """Receives every successful analysis result."""

    def on_sentiment_update(self, result: SentimentAnalysisResult) -> None:
        ...


def _stage_error(kind: type[SentimentError]) -> ErrorFactory:
    """Error factory that keeps provider-raised errors of the stage's kind."""
    def make(description: str, cause: Optional[BaseException]) -> SentimentError:
        if isinstance(cause, (kind, RateLimitError)):
            return cause
        return kind(description, cause=cause)
    return make


class SentimentAnalysisService:
    """
    Single entry point for per-message sentiment analysis.

    Usage:
        service = SentimentAnalysisService(embeddings, store, cache)
        await service.initialize()
        result = await service.analyze_sentiment(
            "LFG 🚀🚀🚀",
            AnalysisRequestContext(user_id="u1", room_id="chat-1"),
        )
        await service.cleanup()
    """

    SERVICE_NAME = "SentimentAnalysis"

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        cache: SentimentCache,
        strategy: Optional[AnalysisStrategy] = None,
        config: Optional[SentimentConfig] = None,
        lexicon: Optional[SentimentLexicon] = None,
    ) -> None:
        self._config = config or SentimentConfig()
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._cache = cache
        self._lexicon = lexicon or self._config.load_lexicon()
        self._strategy: AnalysisStrategy = strategy or LexicalSentimentStrategy(
            lexicon=self._lexicon,
            thresholds=self._config.thresholds,
            clamp_confidence=self._config.analysis.clamp_confidence,
        )
        self._aggregator = ContextAggregator()
        self._recovery = ErrorRecovery(self.SERVICE_NAME)

        self._state = ServiceState.UNINITIALIZED
        self._init_lock = asyncio.Lock()
        self._observers: list[SentimentObserver] = []
        self._reference_embeddings: LRUCache[str, Embedding] = LRUCache(
            self._config.cache.max_reference_embeddings
        )
        self._anchors: dict[str, list[Embedding]] = self._empty_anchors()
        self._background_tasks: set[asyncio.Task] = set()

        self._stats = {
            "analyses": 0,
            "cache_hits": 0,
            "errors": 0,
            "observer_errors": 0,
            "background_failures": 0,
        }

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == ServiceState.READY

    @property
    def strategy(self) -> AnalysisStrategy:
        return self._strategy

    @staticmethod
    def _empty_anchors() -> dict[str, list[Embedding]]:
        return {"bullish": [], "bearish": [], "neutral": []}

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """
        Embed every anchor term and become READY. Idempotent.

        Raises:
            InitializationError: If a recovery run cannot complete the
                warm-up; the service is left UNINITIALIZED
        """
        async with self._init_lock:
            if self._state == ServiceState.READY:
                return

            self._state = ServiceState.INITIALIZING
            logger.info(f"Initializing sentiment anchors ({len(self._lexicon)} terms)")

            try:
                await self._initialize_anchors()
            except Exception as e:
                init_error = InitializationError("Failed to initialize sentiment anchors", cause=e)
                logger.error(f"Initialization failed: {e}")

                outcome = await self._recovery.attempt_recovery(init_error, self._initialize_anchors)
                if not outcome.success:
                    self._state = ServiceState.UNINITIALIZED
                    raise init_error

            self._state = ServiceState.READY
            logger.info("Sentiment analysis service initialized")

    async def _initialize_anchors(self) -> None:
        polarities = {
            "bullish": self._lexicon.bullish,
            "bearish": self._lexicon.bearish,
            "neutral": self._lexicon.neutral,
        }
        anchors = self._empty_anchors()

        for polarity, terms in polarities.items():
            tasks = [asyncio.create_task(self._embed_with_recovery(term)) for term in terms]
            try:
                embeddings = await asyncio.gather(*tasks)
            except Exception as e:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise InitializationError(f"Failed to initialize {polarity} anchors", cause=e) from e

            anchors[polarity] = list(embeddings)
            for term, embedding in zip(terms, embeddings):
                self._reference_embeddings.set(term, embedding)

        self._anchors = anchors

    async def cleanup(self) -> None:
        """
        Release in-memory state, purge expired cache rows and reset to
        UNINITIALIZED.

        Raises:
            AnalysisError: If any cleanup step fails
        """
        logger.info("Starting sentiment analysis service cleanup")
        try:
            await self.wait_for_background_tasks()

            self._observers.clear()
            self._reference_embeddings.clear()
            self._anchors = self._empty_anchors()

            await self._cache.cleanup()

            self._state = ServiceState.UNINITIALIZED
        except Exception as e:
            logger.error(f"Error during sentiment analysis service cleanup: {e}")
            raise AnalysisError("Failed to cleanup sentiment analysis service", cause=e) from e

        logger.info("Sentiment analysis service cleanup completed")

    # ─────────────────────────────────────────────────────────────
    # Observers and strategy
    # ─────────────────────────────────────────────────────────────

    def add_observer(self, observer: SentimentObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: SentimentObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def set_strategy(self, strategy: AnalysisStrategy) -> None:
        """Swap the scoring strategy used by later analyses."""
        self._strategy = strategy
        logger.info(f"Analysis strategy set to {type(strategy).__name__}")

    def _notify_observers(self, result: SentimentAnalysisResult) -> None:
        for observer in list(self._observers):
            try:
                observer.on_sentiment_update(result)
            except Exception as e:
                self._stats["observer_errors"] += 1
                logger.error(f"Sentiment observer {type(observer).__name__} failed: {e}")

    # ─────────────────────────────────────────────────────────────
    # Analysis
    # ─────────────────────────────────────────────────────────────

    async def analyze_sentiment(
        self,
        text: str,
        context: AnalysisRequestContext,
    ) -> SentimentAnalysisResult:
        """
        Analyze one message.

        Args:
            text: Message body
            context: Sender identity stored with the cache entry

        Returns:
            SentimentAnalysisResult (``cached=True`` on a cache hit)

        Raises:
            EmbeddingError: Embedding failed after recovery
            VectorStoreError: Similarity query failed after recovery
            AnalysisError: Any other failure
        """
        self._stats["analyses"] += 1
        try:
            if self._state != ServiceState.READY:
                await self.initialize()

            cached = await self._cache.get(text, context.room_id)
            if cached is not None:
                self._stats["cache_hits"] += 1
                result = cached.to_result()
                self._notify_observers(result)
                return result

            embedding = await self._embed_with_recovery(text)
            score = await self._strategy.analyze(text, embedding)
            similar = await self._query_with_recovery(embedding)
            analysis_context = self._aggregator.aggregate(similar.matches, score.category)

        except (EmbeddingError, VectorStoreError):
            self._stats["errors"] += 1
            raise
        except Exception as e:
            self._stats["errors"] += 1
            raise AnalysisError("Failed to analyze sentiment", cause=e) from e

        self._schedule_background(
            self._persist(text, embedding, score, analysis_context, context)
        )

        result = SentimentAnalysisResult(score=score, context=analysis_context)
        self._notify_observers(result)
        return result

    async def _embed_with_recovery(self, text: str) -> Embedding:
        return await self._recovery.run(
            lambda: self._embedding_provider.generate_embedding(text),
            _stage_error(EmbeddingError),
            f"Failed to generate embedding for text: {text[:50]}",
        )

    async def _query_with_recovery(self, embedding: Embedding) -> VectorQueryResult:
        return await self._recovery.run(
            lambda: self._vector_store.query(
                embedding,
                top_k=self._config.analysis.top_k,
                include_metadata=True,
            ),
            _stage_error(VectorStoreError),
            "Failed to query vector store",
        )

    # ─────────────────────────────────────────────────────────────
    # Background persistence
    # ─────────────────────────────────────────────────────────────

    def _schedule_background(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _persist(
        self,
        text: str,
        embedding: Embedding,
        score: SentimentScore,
        analysis_context: AnalysisContext,
        request: AnalysisRequestContext,
    ) -> None:
        try:
            entry = await self._cache.store(text, embedding, score, analysis_context, request)
        except Exception as e:
            self._stats["background_failures"] += 1
            logger.debug(f"Background cache operation failed: {e}")
            return

        if not self._config.analysis.index_analyzed_messages:
            return

        record = VectorRecord(
            id=entry.message_hash,
            values=list(embedding),
            metadata={
                "category": score.category.value,
                "score": score.score,
                "room_id": request.room_id,
                "user_id": request.user_id,
            },
        )
        try:
            await self._vector_store.upsert([record])
        except Exception as e:
            self._stats["background_failures"] += 1
            logger.debug(f"Background vector upsert failed: {e}")

    async def wait_for_background_tasks(self) -> None:
        """Wait for every in-flight background write to finish."""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # ─────────────────────────────────────────────────────────────
    # Introspection
    # ─────────────────────────────────────────────────────────────

    def get_reference_embedding(self, term: str) -> Optional[Embedding]:
        """Embedding of an anchor term computed during initialization."""
        return self._reference_embeddings.get(term.strip().lower())

    def get_anchor_embeddings(self, polarity: str) -> list[Embedding]:
        """All anchor embeddings for ``bullish``, ``bearish`` or ``neutral``."""
        return list(self._anchors.get(polarity, []))

    def get_stats(self) -> dict[str, Any]:
        return {
            **self._stats,
            "state": self._state.value,
            "observers": len(self._observers),
            "reference_embeddings": len(self._reference_embeddings),
            "pending_background_tasks": len(self._background_tasks),
            "recovery": self._recovery.get_stats(),
            "cache": self._cache.get_stats(),
        }
