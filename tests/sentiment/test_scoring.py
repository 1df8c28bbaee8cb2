"""
Tests for lexical sentiment scoring.

============================================================
PURPOSE
============================================================
- Category thresholds
- Emphasis multiplier signals and compounding
- Emphasis-only messages move off neutral
- Confidence clamping
- Injected lexicons

============================================================
"""

import pytest

from sentiment.lexicon import SentimentLexicon
from sentiment.models import SentimentCategory
from sentiment.scoring import (
    AnalysisStrategy,
    CategoryThresholds,
    LexicalSentimentStrategy,
    calculate_emphasis_multiplier,
    caps_words,
    categorize,
    has_repetition,
)


EMBEDDING = [0.0] * 8


@pytest.fixture
def strategy():
    return LexicalSentimentStrategy()


# ============================================================
# CATEGORIES
# ============================================================

class TestCategorize:
    """Threshold binning."""

    @pytest.mark.parametrize("score,expected", [
        (-1.0, SentimentCategory.STRONGLY_BEARISH),
        (-0.3, SentimentCategory.STRONGLY_BEARISH),
        (-0.2, SentimentCategory.MILDLY_BEARISH),
        (-0.15, SentimentCategory.MILDLY_BEARISH),
        (0.0, SentimentCategory.NEUTRAL),
        (0.15, SentimentCategory.NEUTRAL),
        (0.2, SentimentCategory.MILDLY_BULLISH),
        (0.3, SentimentCategory.MILDLY_BULLISH),
        (0.31, SentimentCategory.STRONGLY_BULLISH),
        (1.0, SentimentCategory.STRONGLY_BULLISH),
    ])
    def test_default_thresholds(self, score, expected):
        assert categorize(score) == expected

    def test_custom_thresholds(self):
        thresholds = CategoryThresholds(
            strongly_bearish=-0.8,
            mildly_bearish=-0.4,
            neutral=0.4,
            mildly_bullish=0.8,
        )
        assert categorize(0.5, thresholds) == SentimentCategory.MILDLY_BULLISH
        assert categorize(-0.5, thresholds) == SentimentCategory.MILDLY_BEARISH

    def test_thresholds_must_ascend(self):
        with pytest.raises(ValueError):
            CategoryThresholds(strongly_bearish=0.5)


# ============================================================
# EMPHASIS
# ============================================================

class TestEmphasisMultiplier:
    """Independent emphasis signals that compound."""

    def test_plain_text_is_one(self):
        assert calculate_emphasis_multiplier("just a normal message") == 1.0

    def test_three_rockets(self):
        assert calculate_emphasis_multiplier("to the 🚀🚀🚀") == pytest.approx(2.5)

    def test_one_rocket(self):
        assert calculate_emphasis_multiplier("ok 🚀") == pytest.approx(1.5)

    def test_diamond_hands(self):
        assert calculate_emphasis_multiplier("holding 💎") == pytest.approx(2.0)

    def test_two_hype_emoji(self):
        assert calculate_emphasis_multiplier("nice 🔥💯") == pytest.approx(2.0)

    def test_bearish_emoji(self):
        assert calculate_emphasis_multiplier("lol 🤡") == pytest.approx(1.8)

    def test_two_caps_words(self):
        assert calculate_emphasis_multiplier("THIS GOES up") == pytest.approx(2.0)

    def test_single_caps_word(self):
        assert calculate_emphasis_multiplier("this GOES up") == pytest.approx(1.5)

    def test_short_caps_words_ignored(self):
        assert caps_words("OK GM hello") == []

    def test_stretched_characters(self):
        assert calculate_emphasis_multiplier("lfgggg") == pytest.approx(1.5)

    def test_repeated_word(self):
        assert has_repetition("buy buy buy")
        assert not has_repetition("buy and hold")

    def test_exclamations(self):
        assert calculate_emphasis_multiplier("nice!") == pytest.approx(1.3)
        assert calculate_emphasis_multiplier("nice!!!") == pytest.approx(1.8)

    def test_caps_and_exclamations_compound(self):
        # 2 caps words x2.0, 3 exclamations x1.8, combination x1.5
        assert calculate_emphasis_multiplier("HUGE NEWS !!!") == pytest.approx(2.0 * 1.8 * 1.5)


# ============================================================
# SCORING
# ============================================================

class TestLexicalSentimentStrategy:
    """End-to-end scoring of messages."""

    def test_is_an_analysis_strategy(self, strategy):
        assert isinstance(strategy, AnalysisStrategy)

    @pytest.mark.asyncio
    async def test_emphatic_bullish_message(self, strategy):
        result = await strategy.analyze("AMAZING!!! 🚀🚀🚀", EMBEDDING)
        assert result.category == SentimentCategory.STRONGLY_BULLISH
        assert result.score > 0.3

    @pytest.mark.asyncio
    async def test_repeated_bearish_term(self, strategy):
        result = await strategy.analyze("terrible terrible terrible", EMBEDDING)
        assert result.category == SentimentCategory.STRONGLY_BEARISH
        assert result.score < -0.3

    @pytest.mark.asyncio
    async def test_plain_message_is_neutral(self, strategy):
        result = await strategy.analyze("see you tomorrow", EMBEDDING)
        assert result.score == 0.0
        assert result.category == SentimentCategory.NEUTRAL
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_matching_is_case_insensitive(self, strategy):
        lower = await strategy.analyze("wagmi", EMBEDDING)
        upper = await strategy.analyze("Wagmi", EMBEDDING)
        assert lower.score == upper.score > 0

    @pytest.mark.asyncio
    async def test_balanced_terms_fall_back_to_emphasis(self, strategy):
        # one bullish and one bearish short term cancel out; no emphasis left
        result = await strategy.analyze("great but rekt", EMBEDDING)
        assert result.score == 0.0

    @pytest.mark.asyncio
    async def test_all_caps_alone_moves_off_neutral(self, strategy):
        result = await strategy.analyze("WHAT IS HAPPENING", EMBEDDING)
        assert result.score > 0.15

    @pytest.mark.asyncio
    async def test_bearish_emoji_alone_is_bearish(self):
        strategy = LexicalSentimentStrategy(lexicon=SentimentLexicon(bullish=("moon",), bearish=("dump",)))
        result = await strategy.analyze("well 💀", EMBEDDING)
        assert result.score < 0

    @pytest.mark.asyncio
    async def test_score_is_clamped(self, strategy):
        result = await strategy.analyze("AMAZING FANTASTIC!!! 🚀🚀🚀 💎 🔥💯", EMBEDDING)
        assert result.score == 1.0

    @pytest.mark.asyncio
    async def test_confidence_clamped_by_default(self, strategy):
        result = await strategy.analyze("AMAZING!!! 🚀🚀🚀", EMBEDDING)
        assert 0.0 <= result.confidence <= 1.0
        assert result.confidence == 1.0

    @pytest.mark.asyncio
    async def test_confidence_unclamped_when_disabled(self):
        strategy = LexicalSentimentStrategy(clamp_confidence=False)
        result = await strategy.analyze("AMAZING!!! 🚀🚀🚀", EMBEDDING)
        assert result.confidence == pytest.approx(2.5 * 1.5 * 1.8)

    @pytest.mark.asyncio
    async def test_custom_lexicon(self):
        lexicon = SentimentLexicon(bullish=("pamp",), bearish=("damp",))
        strategy = LexicalSentimentStrategy(lexicon=lexicon)

        bullish = await strategy.analyze("pamp it", EMBEDDING)
        bearish = await strategy.analyze("damp it", EMBEDDING)
        unknown = await strategy.analyze("wagmi", EMBEDDING)

        assert bullish.score > 0
        assert bearish.score < 0
        assert unknown.score == 0.0

    @pytest.mark.asyncio
    async def test_deterministic(self, strategy):
        first = await strategy.analyze("lfg 🚀 moon", EMBEDDING)
        second = await strategy.analyze("lfg 🚀 moon", EMBEDDING)
        assert first == second
