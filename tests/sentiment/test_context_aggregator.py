"""
Tests for trend, volatility and dominant-category aggregation.
"""

import pytest

from sentiment.context import (
    ContextAggregator,
    calculate_trend,
    calculate_volatility,
    dominant_category,
)
from sentiment.models import SentimentCategory, VectorMatch


def match(score: float, category=None, id_: str = "m") -> VectorMatch:
    metadata = {"category": category} if category is not None else {}
    return VectorMatch(id=id_, score=score, metadata=metadata)


class TestVolatility:
    """Dispersion of similarity scores."""

    def test_flat_sequence_is_zero(self):
        assert calculate_volatility([0.5, 0.5, 0.5, 0.5]) == 0.0

    def test_alternating_much_higher_than_flat(self):
        alternating = calculate_volatility([0.1, 0.9, 0.1, 0.9])
        flat = calculate_volatility([0.5, 0.5, 0.5, 0.5])
        assert alternating > flat + 0.5

    def test_bounded(self):
        assert calculate_volatility([0.0, 1.0, 0.0, 1.0, 0.0]) == 1.0
        assert 0.0 <= calculate_volatility([0.5, 0.52, 0.49]) <= 1.0

    @pytest.mark.parametrize("scores", [[], [0.7]])
    def test_insufficient_history(self, scores):
        assert calculate_volatility(scores) == 0.0

    def test_recent_jumps_weigh_more(self):
        early_jump = calculate_volatility([0.1, 0.4, 0.4, 0.4])
        late_jump = calculate_volatility([0.4, 0.4, 0.1, 0.4])
        assert late_jump > early_jump


class TestTrend:
    """Directional momentum of similarity scores."""

    def test_increasing_is_positive(self):
        assert calculate_trend([0.1, 0.3, 0.5, 0.7]) > 0

    def test_decreasing_is_negative(self):
        assert calculate_trend([0.7, 0.5, 0.3, 0.1]) < 0

    def test_flat_is_zero(self):
        assert calculate_trend([0.4, 0.4, 0.4]) == 0.0

    def test_bounded(self):
        assert calculate_trend([0.0, 1.0]) == 1.0
        assert calculate_trend([1.0, 0.0]) == -1.0

    @pytest.mark.parametrize("scores", [[], [0.3]])
    def test_insufficient_history(self, scores):
        assert calculate_trend(scores) == 0.0


class TestDominantCategory:
    """Majority vote over neighbour metadata."""

    def test_majority_wins(self):
        matches = [
            match(0.9, "strongly_bullish"),
            match(0.8, "neutral"),
            match(0.7, "strongly_bullish"),
        ]
        assert dominant_category(matches, SentimentCategory.NEUTRAL) == SentimentCategory.STRONGLY_BULLISH

    def test_falls_back_without_metadata(self):
        matches = [match(0.9), match(0.8)]
        assert dominant_category(matches, SentimentCategory.MILDLY_BEARISH) == SentimentCategory.MILDLY_BEARISH

    def test_unknown_categories_ignored(self):
        matches = [match(0.9, "sideways"), match(0.8, "mildly_bullish")]
        assert dominant_category(matches, SentimentCategory.NEUTRAL) == SentimentCategory.MILDLY_BULLISH

    def test_tie_goes_to_last_tied_category(self):
        matches = [match(0.9, "mildly_bearish"), match(0.8, "mildly_bullish")]
        assert dominant_category(matches, SentimentCategory.NEUTRAL) == SentimentCategory.MILDLY_BULLISH

    def test_tie_ignores_lower_counts_seen_later(self):
        matches = [
            match(0.9, "strongly_bearish"),
            match(0.8, "neutral"),
            match(0.7, "strongly_bearish"),
            match(0.6, "neutral"),
            match(0.5, "mildly_bullish"),
        ]
        assert dominant_category(matches, SentimentCategory.MILDLY_BULLISH) == SentimentCategory.NEUTRAL


class TestContextAggregator:
    """Full context from matches."""

    def test_aggregate(self):
        matches = [
            match(0.1, "neutral"),
            match(0.3, "mildly_bullish"),
            match(0.5, "mildly_bullish"),
            match(0.7),
        ]
        context = ContextAggregator().aggregate(matches, SentimentCategory.NEUTRAL)

        assert context.recent_trend > 0
        assert 0.0 <= context.volatility <= 1.0
        assert context.dominant_category == SentimentCategory.MILDLY_BULLISH

    def test_no_matches(self):
        context = ContextAggregator().aggregate([], SentimentCategory.STRONGLY_BEARISH)
        assert context.recent_trend == 0.0
        assert context.volatility == 0.0
        assert context.dominant_category == SentimentCategory.STRONGLY_BEARISH


class TestSentimentCategoryParse:
    """Lenient category lookup for store metadata."""

    def test_known_value(self):
        assert SentimentCategory.parse("neutral") == SentimentCategory.NEUTRAL

    def test_member_passes_through(self):
        assert SentimentCategory.parse(SentimentCategory.STRONGLY_BULLISH) == SentimentCategory.STRONGLY_BULLISH

    @pytest.mark.parametrize("value", [None, "", "sideways", 3])
    def test_unknown_is_none(self, value):
        assert SentimentCategory.parse(value) is None
