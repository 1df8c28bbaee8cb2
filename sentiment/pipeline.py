"""
Window Sentiment Pipeline - Turns a ready message window into one
aggregate sentiment reading.

This pipeline:
1. Analyzes every message of the window concurrently
2. Weights each score by its confidence
3. Picks the majority category
4. Keeps the per-message category sequence as the window's trend
5. Hands the WindowSentiment to an optional async callback

Use ``handle_window`` as the processor of a MessageWindowManager.
"""

import asyncio
import logging
from collections import Counter
from typing import Awaitable, Callable, Optional, Sequence

from message_window.models import MessageWindow

from .models import (
    AnalysisRequestContext,
    SentimentAnalysisResult,
    SentimentCategory,
    WindowSentiment,
)
from .service import SentimentAnalysisService


logger = logging.getLogger(__name__)


WindowResultCallback = Callable[[WindowSentiment], Awaitable[None]]


class WindowSentimentPipeline:
    """
    Window processor backed by a SentimentAnalysisService.

    Usage:
        pipeline = WindowSentimentPipeline(service, on_result=publish)
        await manager.start_processing(pipeline.handle_window)
    """

    def __init__(
        self,
        service: SentimentAnalysisService,
        on_result: Optional[WindowResultCallback] = None,
    ) -> None:
        self._service = service
        self._on_result = on_result
        self._stats = {
            "windows_analyzed": 0,
            "messages_analyzed": 0,
        }

    async def handle_window(self, window: MessageWindow) -> None:
        """
        Analyze ``window`` and publish the result.

        Any analysis failure propagates so the window manager logs it and
        leaves the window unfinished.
        """
        sentiment = await self.analyze_window(window)
        if self._on_result is not None:
            await self._on_result(sentiment)

    async def analyze_window(self, window: MessageWindow) -> WindowSentiment:
        results = await asyncio.gather(*(
            self._service.analyze_sentiment(
                entry.text,
                AnalysisRequestContext(
                    user_id=entry.user_id,
                    room_id=window.chat_id,
                    sender_name=entry.user_id,
                ),
            )
            for entry in window.messages
        ))

        sentiment = self.aggregate(window, list(results))
        self._stats["windows_analyzed"] += 1
        self._stats["messages_analyzed"] += sentiment.message_count
        logger.info(
            f"Window {window.window_id}: {sentiment.category.value} "
            f"score={sentiment.score:.3f} confidence={sentiment.confidence:.3f} "
            f"messages={sentiment.message_count}"
        )
        return sentiment

    @staticmethod
    def aggregate(
        window: MessageWindow,
        results: Sequence[SentimentAnalysisResult],
    ) -> WindowSentiment:
        """
        Combine per-message results.

        Score is the confidence-weighted mean (plain mean when every
        confidence is 0). Category ties go to the first one seen.
        """
        if not results:
            return WindowSentiment(
                window_id=window.window_id,
                chat_id=window.chat_id,
                score=0.0,
                category=SentimentCategory.NEUTRAL,
                confidence=0.0,
                trends=[],
                message_count=0,
                results=[],
            )

        scores = [r.score.score for r in results]
        confidences = [r.score.confidence for r in results]
        total_confidence = sum(confidences)

        if total_confidence > 0:
            score = sum(s * c for s, c in zip(scores, confidences)) / total_confidence
        else:
            score = sum(scores) / len(scores)

        trends = [r.score.category for r in results]
        category = Counter(trends).most_common(1)[0][0]

        return WindowSentiment(
            window_id=window.window_id,
            chat_id=window.chat_id,
            score=max(-1.0, min(1.0, score)),
            category=category,
            confidence=total_confidence / len(results),
            trends=trends,
            message_count=len(results),
            results=list(results),
        )

    def get_stats(self) -> dict[str, int]:
        return dict(self._stats)
