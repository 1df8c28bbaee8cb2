"""
Context Aggregator - Trend, volatility and dominant category over a
message's nearest neighbours.

Scores are ordered oldest first, most recent last. Later differences
weigh more (exponential recency factor), and large jumps are amplified
so that choppy conversations stand out from steady ones.
"""

import logging
from collections import Counter
from typing import Optional, Sequence

from .models import AnalysisContext, SentimentCategory, VectorMatch


logger = logging.getLogger(__name__)


VOLATILITY_POWER = 3
VOLATILITY_RECENCY_BASE = 4
VOLATILITY_SCALE = 8

TREND_POWER = 2
TREND_RECENCY_BASE = 3
TREND_SCALE = 6


def _recency_weighted_mean(values: Sequence[float], base: float) -> float:
    n = len(values)
    weighted = [v * base ** (i / n) for i, v in enumerate(values)]
    return sum(weighted) / n


def calculate_volatility(scores: Sequence[float]) -> float:
    """
    Dispersion of a score sequence in [0, 1].

    Consecutive absolute differences are cubed, recency-weighted (base 4),
    averaged and scaled by 8. Fewer than two scores yields 0.
    """
    if len(scores) < 2:
        return 0.0

    diffs = [abs(b - a) ** VOLATILITY_POWER for a, b in zip(scores, scores[1:])]
    volatility = _recency_weighted_mean(diffs, VOLATILITY_RECENCY_BASE) * VOLATILITY_SCALE
    return max(0.0, min(1.0, volatility))


def calculate_trend(scores: Sequence[float]) -> float:
    """
    Directional momentum of a score sequence in [-1, 1].

    Consecutive signed differences are squared keeping their sign,
    recency-weighted (base 3), averaged and scaled by 6. Fewer than two
    scores yields 0.
    """
    if len(scores) < 2:
        return 0.0

    changes = []
    for a, b in zip(scores, scores[1:]):
        d = b - a
        changes.append((abs(d) ** TREND_POWER) * (1 if d > 0 else -1 if d < 0 else 0))

    trend = _recency_weighted_mean(changes, TREND_RECENCY_BASE) * TREND_SCALE
    return max(-1.0, min(1.0, trend))


def dominant_category(
    matches: Sequence[VectorMatch],
    fallback: SentimentCategory,
) -> SentimentCategory:
    """
    Majority vote over the ``category`` metadata of ``matches``.

    Ties go to the last of the tied categories in first-seen order.
    Matches without a recognizable category are ignored; if none has one,
    ``fallback`` wins.
    """
    categories = []
    for match in matches:
        category = SentimentCategory.parse((match.metadata or {}).get("category"))
        if category is not None:
            categories.append(category)

    if not categories:
        return fallback

    best, best_count = fallback, 0
    for category, count in Counter(categories).items():
        if count >= best_count:
            best, best_count = category, count
    return best


class ContextAggregator:
    """Builds an AnalysisContext from similarity query matches."""

    def aggregate(
        self,
        matches: Sequence[VectorMatch],
        current_category: SentimentCategory,
        scores: Optional[Sequence[float]] = None,
    ) -> AnalysisContext:
        """
        Args:
            matches: Nearest neighbours, in the order returned by the store
            current_category: Category of the message being analyzed
            scores: Override for the similarity scores (defaults to the
                matches' own scores)
        """
        if scores is None:
            scores = [m.score for m in matches]

        context = AnalysisContext(
            recent_trend=calculate_trend(scores),
            volatility=calculate_volatility(scores),
            dominant_category=dominant_category(matches, current_category),
        )
        logger.debug(
            f"Context from {len(matches)} neighbours: trend={context.recent_trend:.3f} "
            f"volatility={context.volatility:.3f} dominant={context.dominant_category.value}"
        )
        return context
