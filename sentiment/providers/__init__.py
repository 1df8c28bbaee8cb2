"""Embedding and vector-store providers."""

from .base import EmbeddingProvider, VectorStore
from .factory import create_embedding_provider, create_vector_store
from .memory import InMemoryVectorStore, cosine_similarity
from .openai import OpenAIEmbeddingProvider
from .pinecone import PineconeVectorStore

__all__ = [
    "EmbeddingProvider",
    "VectorStore",
    "InMemoryVectorStore",
    "OpenAIEmbeddingProvider",
    "PineconeVectorStore",
    "cosine_similarity",
    "create_embedding_provider",
    "create_vector_store",
]
