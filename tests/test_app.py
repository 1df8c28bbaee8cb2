"""
Tests for the command-line entry point helpers.
"""

import argparse
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app import create_parser, parse_line, run_application
from storage import DatabaseInitializationError


ENV_VARS = (
    "OPENAI_API_KEY",
    "PINECONE_API_KEY",
    "PINECONE_INDEX",
    "PINECONE_HOST",
    "VECTOR_STORE_PROVIDER",
    "SENTIMENT_DATABASE_URL",
    "SENTIMENT_LEXICON_PATH",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def embeddings():
    provider = MagicMock()
    provider.close = AsyncMock()
    with patch("app.create_embedding_provider", return_value=provider):
        yield provider


def run_args() -> argparse.Namespace:
    return argparse.Namespace(config=None, log_level="INFO", no_drain=True)


class TestParseLine:
    """Tab-separated stdin records."""

    def test_valid_line(self):
        message = parse_line("chat-1\tu1\tLFG 🚀🚀🚀\n")
        assert message.chat_id == "chat-1"
        assert message.user_id == "u1"
        assert message.text == "LFG 🚀🚀🚀"

    def test_text_may_contain_tabs(self):
        message = parse_line("chat-1\tu1\tcol1\tcol2")
        assert message.text == "col1\tcol2"

    @pytest.mark.parametrize("line", ["", "\n", "chat-1\tu1", "chat-1\tu1\t   \n"])
    def test_malformed_lines(self, line):
        assert parse_line(line) is None


class TestParser:
    """Argument parsing."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        args = create_parser().parse_args([])
        assert args.config is None
        assert args.log_level == "INFO"
        assert not args.no_drain

    def test_flags(self):
        args = create_parser().parse_args(["-c", "config.yaml", "--log-level", "DEBUG", "--no-drain"])
        assert str(args.config) == "config.yaml"
        assert args.log_level == "DEBUG"
        assert args.no_drain


class TestStartupFailures:
    """Startup errors exit with status 1 and release what was opened."""

    @pytest.mark.asyncio
    async def test_vector_store_misconfigured(self, clean_env, embeddings):
        clean_env.setenv("VECTOR_STORE_PROVIDER", "pinecone")

        assert await run_application(run_args()) == 1

        embeddings.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_database_unavailable(self, clean_env, embeddings):
        database = MagicMock()
        database.connect = AsyncMock(side_effect=DatabaseInitializationError("no tables"))
        database.disconnect = AsyncMock()

        with patch("app.Database", return_value=database):
            assert await run_application(run_args()) == 1

        embeddings.close.assert_awaited_once()
        database.disconnect.assert_awaited_once()
