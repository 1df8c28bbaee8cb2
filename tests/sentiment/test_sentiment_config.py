"""
Tests for SentimentConfig.
"""

import pytest

from sentiment.config import (
    AnalysisConfig,
    CacheConfig,
    SentimentConfig,
    VectorStoreConfig,
    get_config,
    set_config,
)
from sentiment.lexicon import DEFAULT_LEXICON
from sentiment.scoring import CategoryThresholds


ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_EMBEDDING_MODEL",
    "PINECONE_API_KEY",
    "PINECONE_INDEX",
    "PINECONE_HOST",
    "VECTOR_STORE_PROVIDER",
    "SENTIMENT_CACHE_TTL_SECONDS",
    "SENTIMENT_CACHE_KEY_BY_ROOM",
    "SENTIMENT_TOP_K",
    "SENTIMENT_CLAMP_CONFIDENCE",
    "SENTIMENT_LEXICON_PATH",
    "SENTIMENT_DATABASE_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSentimentConfig:
    """Defaults, validation and loading."""

    def test_defaults(self):
        config = SentimentConfig()
        assert config.cache.ttl_seconds == 86_400
        assert not config.cache.key_by_room
        assert config.analysis.top_k == 5
        assert config.analysis.clamp_confidence
        assert config.vector_store.provider == "memory"
        assert config.embedding.dimensions == 1536
        assert config.load_lexicon() is DEFAULT_LEXICON

    @pytest.mark.parametrize("kwargs", [
        {"analysis": AnalysisConfig(top_k=0)},
        {"cache": CacheConfig(ttl_seconds=0)},
        {"vector_store": VectorStoreConfig(provider="faiss")},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SentimentConfig(**kwargs)

    def test_from_env(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("SENTIMENT_CACHE_TTL_SECONDS", "600")
        clean_env.setenv("SENTIMENT_CACHE_KEY_BY_ROOM", "true")
        clean_env.setenv("SENTIMENT_CLAMP_CONFIDENCE", "no")

        config = SentimentConfig.from_env()

        assert config.embedding.api_key == "sk-test"
        assert config.cache.ttl_seconds == 600
        assert config.cache.key_by_room
        assert not config.analysis.clamp_confidence
        assert config.vector_store.provider == "memory"

    def test_pinecone_key_selects_pinecone(self, clean_env):
        clean_env.setenv("PINECONE_API_KEY", "pc-test")
        config = SentimentConfig.from_env()
        assert config.vector_store.provider == "pinecone"
        assert config.vector_store.api_key == "pc-test"

    def test_from_yaml(self, clean_env, tmp_path):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        path = tmp_path / "config.yaml"
        path.write_text(
            "sentiment:\n"
            "  analysis:\n"
            "    top_k: 10\n"
            "  thresholds:\n"
            "    neutral: 0.1\n"
            "  database_url: \"sqlite+aiosqlite:///:memory:\"\n"
        )

        config = SentimentConfig.from_yaml(path)

        assert config.analysis.top_k == 10
        assert config.thresholds == CategoryThresholds(neutral=0.1)
        assert config.embedding.api_key == "sk-env"
        assert config.database_url == "sqlite+aiosqlite:///:memory:"

    def test_custom_lexicon_path(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("bullish: [pamp]\nbearish: [damp]\n")

        lexicon = SentimentConfig(lexicon_path=str(path)).load_lexicon()

        assert lexicon.bullish == ("pamp",)

    def test_to_dict_hides_secrets(self):
        config = SentimentConfig()
        config.embedding.api_key = "sk-secret"
        data = config.to_dict()
        assert "sk-secret" not in str(data)
        assert data["embedding"]["api_key_set"]

    def test_default_instance(self):
        config = SentimentConfig(analysis=AnalysisConfig(top_k=3))
        set_config(config)
        try:
            assert get_config() is config
        finally:
            set_config(None)
