#!/usr/bin/env python3
"""
Chat Sentiment Windows - Application Entry Point.

============================================================
USAGE
============================================================
Messages are read from stdin, one per line:

    <chat_id>\t<user_id>\t<text>

Each chat's messages are batched into time windows; every ready window
is analyzed and its aggregate sentiment is logged.

    cat messages.tsv | python app.py --log-level DEBUG
    python app.py --config config.yaml

Environment-based configuration (.env supported):
    OPENAI_API_KEY, PINECONE_API_KEY, PINECONE_INDEX,
    SENTIMENT_DATABASE_URL, WINDOW_SIZE_MS, LOG_LEVEL

============================================================
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from message_window import MessageInput, MessageWindowManager, WindowConfig
from sentiment import (
    SentimentAnalysisService,
    SentimentCache,
    SentimentConfig,
    SentimentError,
    WindowSentiment,
    WindowSentimentPipeline,
    create_embedding_provider,
    create_vector_store,
)
from storage import Database, DatabasePersistenceError


logger = logging.getLogger(__name__)


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chat-sentiment",
        description="Windowed sentiment analysis for a stream of chat messages",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        metavar="FILE",
        help="YAML file with 'window' and 'sentiment' sections",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: LOG_LEVEL env or INFO)",
    )
    parser.add_argument(
        "--no-drain",
        action="store_true",
        help="Exit at end of input without waiting for open windows",
    )
    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def parse_line(line: str) -> Optional[MessageInput]:
    """Parse ``chat_id<TAB>user_id<TAB>text``; None for blank or malformed lines."""
    parts = line.rstrip("\r\n").split("\t", 2)
    if len(parts) != 3 or not parts[2].strip():
        return None
    chat_id, user_id, text = parts
    return MessageInput(text=text, user_id=user_id, chat_id=chat_id)


# ============================================================
# RUNTIME
# ============================================================

async def log_window_sentiment(sentiment: WindowSentiment) -> None:
    logger.info(
        f"[{sentiment.chat_id}] {sentiment.category.value} "
        f"score={sentiment.score:+.3f} confidence={sentiment.confidence:.2f} "
        f"messages={sentiment.message_count} "
        f"trend={[c.value for c in sentiment.trends]}"
    )


async def read_messages(manager: MessageWindowManager) -> int:
    """Feed stdin lines to the window manager until EOF."""
    loop = asyncio.get_running_loop()
    count = 0
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            return count
        message = parse_line(line)
        if message is None:
            logger.warning(f"Skipping malformed input line: {line.strip()[:80]}")
            continue
        manager.add_message(message)
        count += 1


async def run_application(args: argparse.Namespace) -> int:
    """
    Wire storage, providers, service and window manager, then process
    stdin until EOF.

    Returns:
        Exit code
    """
    if args.config:
        window_config = WindowConfig.from_yaml(args.config)
        sentiment_config = SentimentConfig.from_yaml(args.config)
    else:
        window_config = WindowConfig.from_env()
        sentiment_config = SentimentConfig.from_env()

    try:
        embeddings = create_embedding_provider(sentiment_config)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    store = None
    database = None
    service = None
    manager = None

    try:
        store = create_vector_store(sentiment_config)
        database = Database(sentiment_config.database_url)
        await database.connect()

        service = SentimentAnalysisService(
            embeddings,
            store,
            SentimentCache(
                database,
                ttl_seconds=sentiment_config.cache.ttl_seconds,
                key_by_room=sentiment_config.cache.key_by_room,
            ),
            config=sentiment_config,
        )
        pipeline = WindowSentimentPipeline(service, on_result=log_window_sentiment)
        manager = MessageWindowManager(window_config)

        await service.initialize()
        await manager.start_processing(pipeline.handle_window)

        logger.info("Reading messages from stdin (chat_id<TAB>user_id<TAB>text)")
        count = await read_messages(manager)
        logger.info(f"End of input after {count} messages")

        if not args.no_drain and manager.active_window_count:
            drain_ms = window_config.window_size_ms + window_config.processing_interval_ms
            logger.info(f"Draining open windows for {drain_ms / 1000:.1f}s")
            await asyncio.sleep(drain_ms / 1000)

        return 0

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except DatabasePersistenceError as e:
        logger.error(f"Database unavailable: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    finally:
        await shutdown(manager, service, (embeddings, store), database)


async def shutdown(
    manager: Optional[MessageWindowManager],
    service: Optional[SentimentAnalysisService],
    providers: tuple,
    database: Optional[Database],
) -> None:
    """Release whatever run_application managed to start."""
    if manager is not None:
        await manager.stop_processing()
        logger.info(f"Window stats: {manager.get_stats()}")
    if service is not None:
        try:
            await service.cleanup()
        except SentimentError as e:
            logger.error(f"Sentiment service cleanup failed: {e}")
    for provider in providers:
        close = getattr(provider, "close", None)
        if close is not None:
            await close()
    if database is not None:
        await database.disconnect()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    return asyncio.run(run_application(args))


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
