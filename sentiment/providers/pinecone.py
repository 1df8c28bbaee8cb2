"""
Pinecone Vector Store - aiohttp client for the Pinecone REST API.

The index is resolved lazily on first use: the control plane is asked
to describe it, and it is created (serverless) when missing. Data-plane
calls then go to the index host.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

import aiohttp

from ..config import VectorStoreConfig
from ..exceptions import RateLimitError, VectorStoreError
from ..models import Embedding, VectorMatch, VectorQueryResult, VectorRecord
from .base import retry_after_ms


logger = logging.getLogger(__name__)


DEFAULT_RETRY_AFTER_SECONDS = 1


class PineconeVectorStore:
    """
    Vector store backed by a Pinecone serverless index.

    Usage:
        store = PineconeVectorStore(VectorStoreConfig(api_key="...", index_name="chat"))
        result = await store.query(vector, top_k=5)
        await store.close()
    """

    CONTROL_URL = "https://api.pinecone.io"
    API_VERSION = "2024-07"
    READY_POLL_SECONDS = 5.0
    READY_TIMEOUT_SECONDS = 60.0

    def __init__(
        self,
        config: Optional[VectorStoreConfig] = None,
        dimension: int = 1536,
    ) -> None:
        self.config = config or VectorStoreConfig(provider="pinecone")
        if not self.config.api_key:
            raise ValueError("Pinecone API key is required")
        self.dimension = dimension
        self._host: Optional[str] = self.config.host
        self._session: Optional[aiohttp.ClientSession] = None
        self._init_lock = asyncio.Lock()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    "Api-Key": self.config.api_key,
                    "Content-Type": "application/json",
                    "X-Pinecone-API-Version": self.API_VERSION,
                },
            )
        return self._session

    # ─────────────────────────────────────────────────────────────
    # Index lifecycle
    # ─────────────────────────────────────────────────────────────

    async def _ensure_index(self) -> str:
        """Return the index host, describing or creating the index once."""
        if self._host:
            return self._host

        async with self._init_lock:
            if self._host:
                return self._host

            description = await self._describe_index()
            if description is None:
                logger.info(f"Creating Pinecone index '{self.config.index_name}'")
                await self._create_index()
                description = await self._wait_until_ready()

            host = description.get("host")
            if not host:
                raise VectorStoreError(
                    f"Pinecone index '{self.config.index_name}' has no host"
                )
            self._host = host if host.startswith("http") else f"https://{host}"
            logger.info(f"Pinecone index '{self.config.index_name}' ready at {self._host}")
            return self._host

    async def _describe_index(self) -> Optional[dict[str, Any]]:
        url = f"{self.CONTROL_URL}/indexes/{self.config.index_name}"
        status, data = await self._request("GET", url)
        if status == 404:
            return None
        if status != 200:
            raise VectorStoreError(
                f"Pinecone describe index failed: {status}",
                details={"response": data},
            )
        return data

    async def _create_index(self) -> None:
        payload = {
            "name": self.config.index_name,
            "dimension": self.dimension,
            "metric": self.config.metric,
            "spec": {
                "serverless": {
                    "cloud": self.config.cloud,
                    "region": self.config.region,
                }
            },
        }
        status, data = await self._request("POST", f"{self.CONTROL_URL}/indexes", payload)
        # 409: created concurrently elsewhere, which is fine
        if status not in (200, 201, 202, 409):
            raise VectorStoreError(
                f"Pinecone create index failed: {status}",
                details={"response": data},
            )

    async def _wait_until_ready(self) -> dict[str, Any]:
        waited = 0.0
        while True:
            description = await self._describe_index()
            if description and (description.get("status") or {}).get("ready"):
                return description
            if waited >= self.READY_TIMEOUT_SECONDS:
                raise VectorStoreError(
                    f"Pinecone index '{self.config.index_name}' not ready "
                    f"after {self.READY_TIMEOUT_SECONDS}s"
                )
            await asyncio.sleep(self.READY_POLL_SECONDS)
            waited += self.READY_POLL_SECONDS

    # ─────────────────────────────────────────────────────────────
    # Data plane
    # ─────────────────────────────────────────────────────────────

    async def query(
        self,
        vector: Embedding,
        top_k: int,
        include_metadata: bool = True,
    ) -> VectorQueryResult:
        host = await self._ensure_index()
        payload = {
            "vector": list(vector),
            "topK": top_k,
            "includeMetadata": include_metadata,
        }
        status, data = await self._request("POST", f"{host}/query", payload)
        if status != 200:
            raise VectorStoreError(f"Pinecone query failed: {status}", details={"response": data})

        matches = [
            VectorMatch(
                id=str(m.get("id", "")),
                score=float(m.get("score") or 0.0),
                metadata=m.get("metadata") or {},
            )
            for m in (data or {}).get("matches", [])
        ]
        return VectorQueryResult(matches=matches)

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        if not records:
            return
        host = await self._ensure_index()
        payload = {
            "vectors": [
                {"id": r.id, "values": list(r.values), "metadata": r.metadata}
                for r in records
            ]
        }
        status, data = await self._request("POST", f"{host}/vectors/upsert", payload)
        if status != 200:
            raise VectorStoreError(f"Pinecone upsert failed: {status}", details={"response": data})

    async def health_check(self) -> bool:
        """True when the configured index exists."""
        return await self._describe_index() is not None

    async def _request(
        self,
        method: str,
        url: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> tuple[int, Any]:
        session = await self._get_session()
        try:
            async with session.request(method, url, json=payload) as response:
                if response.status == 429:
                    raise RateLimitError(
                        "Pinecone rate limit exceeded",
                        retry_after_ms=retry_after_ms(response.headers, DEFAULT_RETRY_AFTER_SECONDS),
                    )
                if response.content_type == "application/json":
                    data = await response.json()
                else:
                    data = (await response.text())[:500]
                return response.status, data
        except aiohttp.ClientError as e:
            raise VectorStoreError(f"Network error: {e}", cause=e) from e

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
