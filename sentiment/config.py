"""
Sentiment Configuration - Cache, analysis, provider and lexicon settings.

API keys are loaded from environment variables; a YAML file can
override any value under its ``sentiment`` section.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from storage.database import DEFAULT_DATABASE_URL

from .lexicon import DEFAULT_LEXICON, SentimentLexicon
from .scoring import CategoryThresholds


logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class CacheConfig:
    """Sentiment cache and reference-embedding limits."""
    ttl_seconds: int = 24 * 60 * 60
    key_by_room: bool = False
    max_reference_embeddings: int = 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "ttl_seconds": self.ttl_seconds,
            "key_by_room": self.key_by_room,
            "max_reference_embeddings": self.max_reference_embeddings,
        }


@dataclass
class AnalysisConfig:
    """Per-message analysis behaviour."""
    top_k: int = 5
    clamp_confidence: bool = True
    index_analyzed_messages: bool = True  # upsert vectors for later context

    def to_dict(self) -> dict[str, Any]:
        return {
            "top_k": self.top_k,
            "clamp_confidence": self.clamp_confidence,
            "index_analyzed_messages": self.index_analyzed_messages,
        }


@dataclass
class EmbeddingConfig:
    """OpenAI embeddings endpoint settings."""
    api_key: Optional[str] = None
    model: str = "text-embedding-3-small"
    dimensions: int = 1536
    batch_size: int = 100
    timeout_seconds: int = 30
    base_url: str = "https://api.openai.com/v1"

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "dimensions": self.dimensions,
            "batch_size": self.batch_size,
            "timeout_seconds": self.timeout_seconds,
            "base_url": self.base_url,
            "api_key_set": bool(self.api_key),
        }


@dataclass
class VectorStoreConfig:
    """Similarity store settings."""
    provider: str = "memory"  # memory | pinecone
    api_key: Optional[str] = None
    index_name: str = "sentiment-messages"
    host: Optional[str] = None
    metric: str = "cosine"
    cloud: str = "aws"
    region: str = "us-east-1"
    timeout_seconds: int = 30

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "index_name": self.index_name,
            "host": self.host,
            "metric": self.metric,
            "cloud": self.cloud,
            "region": self.region,
            "api_key_set": bool(self.api_key),
        }


@dataclass
class SentimentConfig:
    """Main configuration for the sentiment service."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    thresholds: CategoryThresholds = field(default_factory=CategoryThresholds)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    vector_store: VectorStoreConfig = field(default_factory=VectorStoreConfig)

    # Optional YAML lexicon replacing the built-in one
    lexicon_path: Optional[str] = None

    database_url: str = DEFAULT_DATABASE_URL

    def __post_init__(self) -> None:
        if self.analysis.top_k < 1:
            raise ValueError("analysis.top_k must be at least 1")
        if self.cache.ttl_seconds <= 0:
            raise ValueError("cache.ttl_seconds must be positive")
        if self.vector_store.provider not in ("memory", "pinecone"):
            raise ValueError(f"Unknown vector store provider: {self.vector_store.provider}")

    def load_lexicon(self) -> SentimentLexicon:
        """The configured lexicon, or the built-in default."""
        if self.lexicon_path:
            return SentimentLexicon.from_yaml(self.lexicon_path)
        return DEFAULT_LEXICON

    @classmethod
    def from_env(cls) -> "SentimentConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - OPENAI_API_KEY, OPENAI_EMBEDDING_MODEL
        - PINECONE_API_KEY, PINECONE_INDEX, PINECONE_HOST
        - VECTOR_STORE_PROVIDER (memory | pinecone)
        - SENTIMENT_CACHE_TTL_SECONDS, SENTIMENT_CACHE_KEY_BY_ROOM
        - SENTIMENT_TOP_K, SENTIMENT_CLAMP_CONFIDENCE
        - SENTIMENT_LEXICON_PATH
        - SENTIMENT_DATABASE_URL
        """
        cache_defaults = CacheConfig()
        analysis_defaults = AnalysisConfig()
        embedding_defaults = EmbeddingConfig()
        store_defaults = VectorStoreConfig()

        pinecone_key = os.getenv("PINECONE_API_KEY")
        provider = os.getenv(
            "VECTOR_STORE_PROVIDER",
            "pinecone" if pinecone_key else store_defaults.provider,
        )

        return cls(
            cache=CacheConfig(
                ttl_seconds=int(os.getenv("SENTIMENT_CACHE_TTL_SECONDS", cache_defaults.ttl_seconds)),
                key_by_room=_env_bool("SENTIMENT_CACHE_KEY_BY_ROOM", cache_defaults.key_by_room),
                max_reference_embeddings=cache_defaults.max_reference_embeddings,
            ),
            analysis=AnalysisConfig(
                top_k=int(os.getenv("SENTIMENT_TOP_K", analysis_defaults.top_k)),
                clamp_confidence=_env_bool(
                    "SENTIMENT_CLAMP_CONFIDENCE", analysis_defaults.clamp_confidence
                ),
                index_analyzed_messages=analysis_defaults.index_analyzed_messages,
            ),
            embedding=EmbeddingConfig(
                api_key=os.getenv("OPENAI_API_KEY"),
                model=os.getenv("OPENAI_EMBEDDING_MODEL", embedding_defaults.model),
            ),
            vector_store=VectorStoreConfig(
                provider=provider,
                api_key=pinecone_key,
                index_name=os.getenv("PINECONE_INDEX", store_defaults.index_name),
                host=os.getenv("PINECONE_HOST"),
            ),
            lexicon_path=os.getenv("SENTIMENT_LEXICON_PATH"),
            database_url=os.getenv("SENTIMENT_DATABASE_URL", DEFAULT_DATABASE_URL),
        )

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "SentimentConfig":
        data = data or {}
        return cls(
            cache=CacheConfig(**(data.get("cache") or {})),
            analysis=AnalysisConfig(**(data.get("analysis") or {})),
            thresholds=CategoryThresholds(**(data.get("thresholds") or {})),
            embedding=EmbeddingConfig(**(data.get("embedding") or {})),
            vector_store=VectorStoreConfig(**(data.get("vector_store") or {})),
            lexicon_path=data.get("lexicon_path"),
            database_url=data.get("database_url", DEFAULT_DATABASE_URL),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "SentimentConfig":
        """
        Load the ``sentiment`` section of a YAML config file.

        API keys missing from the file are taken from the environment.
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data.get("sentiment"))
        if config.embedding.api_key is None:
            config.embedding.api_key = os.getenv("OPENAI_API_KEY")
        if config.vector_store.api_key is None:
            config.vector_store.api_key = os.getenv("PINECONE_API_KEY")

        logger.info(f"Loaded sentiment config from {path}")
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            "cache": self.cache.to_dict(),
            "analysis": self.analysis.to_dict(),
            "thresholds": {
                "strongly_bearish": self.thresholds.strongly_bearish,
                "mildly_bearish": self.thresholds.mildly_bearish,
                "neutral": self.thresholds.neutral,
                "mildly_bullish": self.thresholds.mildly_bullish,
            },
            "embedding": self.embedding.to_dict(),
            "vector_store": self.vector_store.to_dict(),
            "lexicon_path": self.lexicon_path,
            "database_url": self.database_url,
        }


# Default configuration instance
_default_config: Optional[SentimentConfig] = None


def get_config() -> SentimentConfig:
    """Get the default configuration (loaded from the environment)."""
    global _default_config
    if _default_config is None:
        _default_config = SentimentConfig.from_env()
    return _default_config


def set_config(config: SentimentConfig) -> None:
    """Set the default configuration."""
    global _default_config
    _default_config = config
