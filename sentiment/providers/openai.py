"""
OpenAI Embedding Provider - aiohttp client for the embeddings endpoint.

Produces fixed-dimension vectors (text-embedding-3-small, 1536 dims by
default). Batch requests are chunked at ``batch_size`` inputs.

Errors:
- HTTP 429 -> RateLimitError (honours Retry-After)
- anything else -> EmbeddingError
"""

import logging
from typing import Any, Optional, Sequence

import aiohttp

from ..config import EmbeddingConfig
from ..exceptions import EmbeddingError, RateLimitError
from ..models import Embedding
from .base import retry_after_ms


logger = logging.getLogger(__name__)


DEFAULT_RETRY_AFTER_SECONDS = 20


def chunk(items: Sequence[Any], size: int) -> list[list[Any]]:
    """Split ``items`` into consecutive lists of at most ``size``."""
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class OpenAIEmbeddingProvider:
    """
    Embedding provider backed by the OpenAI REST API.

    Usage:
        provider = OpenAIEmbeddingProvider(EmbeddingConfig(api_key="sk-..."))
        vector = await provider.generate_embedding("wagmi")
        await provider.close()
    """

    def __init__(self, config: Optional[EmbeddingConfig] = None) -> None:
        self.config = config or EmbeddingConfig()
        if not self.config.api_key:
            raise ValueError("OpenAI API key is required for embeddings")
        if self.config.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._session: Optional[aiohttp.ClientSession] = None

        self._stats = {
            "requests": 0,
            "embeddings": 0,
            "errors": 0,
            "rate_limits_hit": 0,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    "Authorization": f"Bearer {self.config.api_key}",
                    "Content-Type": "application/json",
                },
            )
        return self._session

    async def generate_embedding(self, text: str) -> Embedding:
        """Embed a single text."""
        vectors = await self._create(text)
        if not vectors:
            raise EmbeddingError("OpenAI returned no embedding")
        return vectors[0]

    async def generate_batch_embeddings(self, texts: Sequence[str]) -> list[Embedding]:
        """Embed many texts, one request per ``batch_size`` chunk, order preserved."""
        embeddings: list[Embedding] = []
        for batch in chunk(texts, self.config.batch_size):
            embeddings.extend(await self._create(batch))
        return embeddings

    async def _create(self, text_input: Any) -> list[Embedding]:
        session = await self._get_session()
        url = f"{self.config.base_url.rstrip('/')}/embeddings"
        payload = {
            "model": self.config.model,
            "input": text_input,
            "dimensions": self.config.dimensions,
        }

        self._stats["requests"] += 1
        try:
            async with session.post(url, json=payload) as response:
                if response.status == 429:
                    self._stats["rate_limits_hit"] += 1
                    raise RateLimitError(
                        "OpenAI rate limit exceeded",
                        retry_after_ms=retry_after_ms(response.headers, DEFAULT_RETRY_AFTER_SECONDS),
                    )

                if response.status != 200:
                    body = await response.text()
                    self._stats["errors"] += 1
                    raise EmbeddingError(
                        f"OpenAI API error: {response.status}",
                        details={"status_code": response.status, "response": body[:500]},
                    )

                data = await response.json()

        except aiohttp.ClientError as e:
            self._stats["errors"] += 1
            raise EmbeddingError(f"Network error: {e}", cause=e) from e

        # Responses carry an index per input; sort to be safe
        items = sorted(data.get("data", []), key=lambda d: d.get("index", 0))
        vectors = [list(item["embedding"]) for item in items]
        self._stats["embeddings"] += len(vectors)
        return vectors

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
