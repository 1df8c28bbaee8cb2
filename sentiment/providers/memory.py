"""
In-Memory Vector Store - Cosine-similarity store for local runs and tests.
"""

import logging
import math
from typing import Optional, Sequence

from ..models import Embedding, VectorMatch, VectorQueryResult, VectorRecord


logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors; 0 when either is all zeros."""
    if len(a) != len(b):
        raise ValueError(f"Dimension mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class InMemoryVectorStore:
    """
    Brute-force nearest-neighbour store.

    The index (a dict) is created on first use, mirroring remote stores
    that provision their index lazily.
    """

    def __init__(self, dimension: Optional[int] = None) -> None:
        self.dimension = dimension
        self._index: Optional[dict[str, VectorRecord]] = None

    def _ensure_index(self) -> dict[str, VectorRecord]:
        if self._index is None:
            logger.debug("Creating in-memory vector index")
            self._index = {}
        return self._index

    async def query(
        self,
        vector: Embedding,
        top_k: int,
        include_metadata: bool = True,
    ) -> VectorQueryResult:
        index = self._ensure_index()
        scored = [
            (cosine_similarity(vector, record.values), record)
            for record in index.values()
        ]
        scored.sort(key=lambda pair: pair[0], reverse=True)

        matches = [
            VectorMatch(
                id=record.id,
                score=score,
                metadata=dict(record.metadata) if include_metadata else {},
            )
            for score, record in scored[:top_k]
        ]
        return VectorQueryResult(matches=matches)

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        index = self._ensure_index()
        for record in records:
            if self.dimension is not None and len(record.values) != self.dimension:
                raise ValueError(
                    f"Vector {record.id} has dimension {len(record.values)}, "
                    f"expected {self.dimension}"
                )
            index[record.id] = record

    async def health_check(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._index or {})
