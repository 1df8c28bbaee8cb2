"""
Sentiment Scoring - Lexical anchor matching with emphasis amplification.

Algorithm (LexicalSentimentStrategy):
1. Find every lexicon term contained in the case-folded text
   (substring match). Long terms weigh 1.5, short terms 1.0.
2. raw = (bullish - bearish) / max(bullish + bearish, 1),
   compressed as sign(raw) * sqrt(|raw|).
3. Compute an emphasis multiplier from emoji, ALL-CAPS words,
   repetition and exclamation marks. Signals compound.
4. If raw is 0, synthesize a small score from emphasis alone.
5. score = sign(x) * |x * multiplier| ** 0.7, clamped to [-1, 1].
6. Bin the score into one of five categories.

confidence = multiplier * min(|score|, 1)
"""

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .lexicon import DEFAULT_LEXICON, SentimentLexicon, term_weight
from .models import Embedding, SentimentCategory, SentimentScore


logger = logging.getLogger(__name__)


DAMPENING_EXPONENT = 0.7

ROCKET = "🚀"
STRONG_BULLISH_EMOJI = ("💎", "🙌")
HYPE_EMOJI = ("🔥", "💯", "⭐")
BEARISH_EMOJI = ("💀", "⚰", "🤡", "📉")
POSITIVE_EMOJI = ("🚀", "💎", "🔥", "💪")

_REPEATED_CHARS = re.compile(r"(.)\1{3,}")
_WORD = re.compile(r"\w+")


@runtime_checkable
class AnalysisStrategy(Protocol):
    """Anything that can turn text plus its embedding into a score."""

    async def analyze(self, text: str, embedding: Embedding) -> SentimentScore:
        ...


@dataclass(frozen=True)
class CategoryThresholds:
    """Upper bounds (inclusive) of the four lower sentiment bins."""
    strongly_bearish: float = -0.3
    mildly_bearish: float = -0.15
    neutral: float = 0.15
    mildly_bullish: float = 0.3

    def __post_init__(self) -> None:
        bounds = [self.strongly_bearish, self.mildly_bearish, self.neutral, self.mildly_bullish]
        if bounds != sorted(bounds):
            raise ValueError(f"Category thresholds must be ascending, got {bounds}")


DEFAULT_THRESHOLDS = CategoryThresholds()


def categorize(score: float, thresholds: CategoryThresholds = DEFAULT_THRESHOLDS) -> SentimentCategory:
    """Map a score in [-1, 1] to its category."""
    if score <= thresholds.strongly_bearish:
        return SentimentCategory.STRONGLY_BEARISH
    if score <= thresholds.mildly_bearish:
        return SentimentCategory.MILDLY_BEARISH
    if score <= thresholds.neutral:
        return SentimentCategory.NEUTRAL
    if score <= thresholds.mildly_bullish:
        return SentimentCategory.MILDLY_BULLISH
    return SentimentCategory.STRONGLY_BULLISH


def caps_words(text: str) -> list[str]:
    """Whitespace-separated words of 3+ characters written in capitals."""
    return [word for word in text.split() if len(word) > 2 and word.isupper()]


def has_repetition(text: str) -> bool:
    """True for stretched characters (``LFGGGG``) or a word said 3+ times."""
    if _REPEATED_CHARS.search(text):
        return True
    counts = Counter(word.lower() for word in _WORD.findall(text))
    return any(count >= 3 for count in counts.values())


def calculate_emphasis_multiplier(text: str) -> float:
    """
    Compound emphasis multiplier for a message.

    Each signal multiplies independently:
        3+ rockets x2.5, 1-2 rockets x1.5
        diamond/hands emoji x2.0
        2+ fire/100/star emoji x2.0
        skull/coffin/clown/chart-down emoji x1.8
        2+ CAPS words x2.0, one CAPS word x1.5
        stretched characters or repeated word x1.5
        3+ exclamations x1.8, 1-2 exclamations x1.3
        2+ CAPS words together with 3+ exclamations x1.5
    """
    multiplier = 1.0

    rockets = text.count(ROCKET)
    if rockets >= 3:
        multiplier *= 2.5
    elif rockets > 0:
        multiplier *= 1.5

    if any(e in text for e in STRONG_BULLISH_EMOJI):
        multiplier *= 2.0
    if sum(text.count(e) for e in HYPE_EMOJI) >= 2:
        multiplier *= 2.0

    if any(e in text for e in BEARISH_EMOJI):
        multiplier *= 1.8

    caps = len(caps_words(text))
    if caps >= 2:
        multiplier *= 2.0
    elif caps == 1:
        multiplier *= 1.5

    if has_repetition(text):
        multiplier *= 1.5

    exclamations = text.count("!")
    if exclamations >= 3:
        multiplier *= 1.8
    elif exclamations > 0:
        multiplier *= 1.3

    if caps >= 2 and exclamations >= 3:
        multiplier *= 1.5

    return multiplier


class LexicalSentimentStrategy:
    """
    Default scoring strategy built on a SentimentLexicon.

    The embedding is accepted for interface compatibility and ignored;
    learned strategies can use it instead.
    """

    def __init__(
        self,
        lexicon: SentimentLexicon = DEFAULT_LEXICON,
        thresholds: CategoryThresholds = DEFAULT_THRESHOLDS,
        clamp_confidence: bool = True,
    ) -> None:
        self.lexicon = lexicon
        self.thresholds = thresholds
        self.clamp_confidence = clamp_confidence

    async def analyze(self, text: str, embedding: Embedding) -> SentimentScore:
        score, multiplier = self.score_text(text)
        confidence = multiplier * min(abs(score), 1.0)
        if self.clamp_confidence:
            confidence = max(0.0, min(1.0, confidence))

        return SentimentScore(
            score=score,
            category=categorize(score, self.thresholds),
            confidence=confidence,
        )

    def score_text(self, text: str) -> tuple[float, float]:
        """Return (final score, emphasis multiplier) for ``text``."""
        lowered = text.lower()

        bullish = sum(term_weight(t) for t in self.lexicon.bullish if t in lowered)
        bearish = sum(term_weight(t) for t in self.lexicon.bearish if t in lowered)

        raw = 0.0
        if bullish or bearish:
            raw = (bullish - bearish) / max(bullish + bearish, 1.0)
            raw = math.copysign(math.sqrt(abs(raw)), raw)

        multiplier = calculate_emphasis_multiplier(text)

        if raw == 0:
            raw = self._emphasis_only_score(text)

        if raw == 0:
            return 0.0, multiplier

        score = math.copysign(abs(raw * multiplier) ** DAMPENING_EXPONENT, raw)
        return max(-1.0, min(1.0, score)), multiplier

    @staticmethod
    def _emphasis_only_score(text: str) -> float:
        """Small score for messages with emphasis but no anchor terms."""
        score = 0.0
        if text.isupper() and len(text) > 3:
            score = 0.3
        if "!" in text:
            score += 0.2
        if any(e in text for e in POSITIVE_EMOJI):
            score += 0.3
        if any(e in text for e in BEARISH_EMOJI):
            score = -0.3
        return score
