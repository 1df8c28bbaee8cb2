"""
Provider Interfaces - Capabilities the sentiment service depends on.

The service only needs something that turns text into vectors and
something that stores vectors and answers nearest-neighbour queries.
Concrete providers live next to this module; tests pass mocks.
"""

import math
from typing import Mapping, Protocol, Sequence, runtime_checkable

from ..models import Embedding, VectorQueryResult, VectorRecord


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Text to fixed-dimension vector."""

    async def generate_embedding(self, text: str) -> Embedding:
        ...

    async def generate_batch_embeddings(self, texts: Sequence[str]) -> list[Embedding]:
        ...


@runtime_checkable
class VectorStore(Protocol):
    """Nearest-neighbour store with lazy index creation."""

    async def query(
        self,
        vector: Embedding,
        top_k: int,
        include_metadata: bool = True,
    ) -> VectorQueryResult:
        ...

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        ...

    async def health_check(self) -> bool:
        ...


def retry_after_ms(headers: Mapping[str, str], default_seconds: float) -> int:
    """
    Delay from a 429 response's ``Retry-After`` header, in milliseconds.

    Only the delta-seconds form is honoured; an HTTP-date, a negative or
    otherwise unparseable value falls back to ``default_seconds``.
    """
    try:
        seconds = float(headers.get("Retry-After", default_seconds))
    except (TypeError, ValueError):
        seconds = default_seconds
    if not math.isfinite(seconds) or seconds < 0:
        seconds = default_seconds
    return int(seconds * 1000)
