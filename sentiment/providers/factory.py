"""
Provider Factory - Builds providers from SentimentConfig.

```python
config = SentimentConfig.from_env()
embeddings = create_embedding_provider(config)
store = create_vector_store(config)
```
"""

import logging

from ..config import SentimentConfig
from .base import EmbeddingProvider, VectorStore
from .memory import InMemoryVectorStore
from .openai import OpenAIEmbeddingProvider
from .pinecone import PineconeVectorStore


logger = logging.getLogger(__name__)


def create_embedding_provider(config: SentimentConfig) -> EmbeddingProvider:
    """OpenAI provider; requires ``embedding.api_key``."""
    return OpenAIEmbeddingProvider(config.embedding)


def create_vector_store(config: SentimentConfig) -> VectorStore:
    """Pinecone when configured, otherwise the in-memory store."""
    provider = config.vector_store.provider
    if provider == "pinecone":
        logger.info(f"Using Pinecone vector store '{config.vector_store.index_name}'")
        return PineconeVectorStore(config.vector_store, dimension=config.embedding.dimensions)

    logger.info("Using in-memory vector store")
    return InMemoryVectorStore(dimension=config.embedding.dimensions)
