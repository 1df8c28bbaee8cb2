"""
Sentiment Lexicon - Weighted anchor terms for lexical scoring.

A lexicon is three disjoint sets of terms and emoji (bullish, bearish,
neutral). Terms are matched as case-insensitive substrings of a message,
not as tokens. Lexicons are immutable and are injected into the scoring
strategy, so a deployment can load its own from YAML:

    bullish:
      - moon
      - wagmi
    bearish:
      - rekt
    neutral:
      - dyor
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Union

import yaml


logger = logging.getLogger(__name__)


# Terms longer than this carry extra weight
LONG_TERM_LENGTH = 6
LONG_TERM_WEIGHT = 1.5
SHORT_TERM_WEIGHT = 1.0


def term_weight(term: str) -> float:
    """Weight of a single anchor term."""
    return LONG_TERM_WEIGHT if len(term) > LONG_TERM_LENGTH else SHORT_TERM_WEIGHT


def _normalize_terms(terms: Iterable[Any]) -> tuple[str, ...]:
    """Case-fold, strip and de-duplicate while keeping first-seen order."""
    seen: dict[str, None] = {}
    for term in terms:
        cleaned = str(term).strip().lower()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return tuple(seen)


@dataclass(frozen=True)
class SentimentLexicon:
    """
    Immutable anchor term sets.

    Terms are stored case-folded. Construction fails if any term appears
    in more than one set.
    """
    bullish: tuple[str, ...]
    bearish: tuple[str, ...]
    neutral: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "bullish", _normalize_terms(self.bullish))
        object.__setattr__(self, "bearish", _normalize_terms(self.bearish))
        object.__setattr__(self, "neutral", _normalize_terms(self.neutral))

        overlaps = (
            (set(self.bullish) & set(self.bearish))
            | (set(self.bullish) & set(self.neutral))
            | (set(self.bearish) & set(self.neutral))
        )
        if overlaps:
            raise ValueError(
                f"Lexicon term sets must be disjoint, shared terms: {sorted(overlaps)}"
            )

    @property
    def all_terms(self) -> tuple[str, ...]:
        """Every anchor term, bullish first."""
        return self.bullish + self.bearish + self.neutral

    def __len__(self) -> int:
        return len(self.bullish) + len(self.bearish) + len(self.neutral)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SentimentLexicon":
        return cls(
            bullish=tuple(data.get("bullish") or ()),
            bearish=tuple(data.get("bearish") or ()),
            neutral=tuple(data.get("neutral") or ()),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SentimentLexicon":
        """
        Load a lexicon from a YAML file.

        The file may hold the three lists at top level or under a
        ``lexicon`` key.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if "lexicon" in data:
            data = data["lexicon"] or {}

        lexicon = cls.from_dict(data)
        logger.info(
            f"Loaded sentiment lexicon from {path}: "
            f"{len(lexicon.bullish)} bullish, {len(lexicon.bearish)} bearish, "
            f"{len(lexicon.neutral)} neutral"
        )
        return lexicon


DEFAULT_LEXICON = SentimentLexicon(
    bullish=(
        # General positive
        "amazing", "excellent", "fantastic", "wonderful", "brilliant", "great",
        # Vision
        "web4", "trillion dollar vertical", "next paradigm", "revolutionary",
        "future of ai", "ai evolution", "digital autonomy", "self sovereign",
        # Technology
        "inori network", "crpc protocol", "byzantine risk tolerance",
        "decentralized computation", "ai swarms", "autonomous agents",
        # Community and adoption
        "community takeover", "a16z backing", "scrypted alignment",
        "holder growth", "adoption", "institutional interest",
        # Market and value
        "undervalued", "early", "growth potential", "accumulate",
        "next ethereum", "next bitcoin", "blue chip potential",
        # Philosophy
        "digital life", "ai consciousness", "autonomous future",
        "self ownership", "digital rights", "ai autonomy",
        # Meme culture
        "wagmi", "lfg", "gm", "bullish af", "based", "frfr", "no cap",
        # Community champion phrases
        "community strong", "diamond hands only", "real ones know",
        "tim delivers", "chad is evolving", "imagine being bearish",
        "early af", "ngmi if no avb", "generational wealth",
        "community > everything", "avb family", "day 1 believers",
        "tim called it", "scrypted bullish", "inori incoming",
        "look at the vision", "compare the mcap", "institutional soon",
        "fud destroyed", "bears in shambles", "stay humble stack avb",
        "tim working while you sleeping", "chad getting smarter",
        "paper hands shaken out", "real builders build", "trust the process",
        # Profanity
        "fuck yeah", "fucking yeah", "fuck yes", "fucking yes",
        "fucking amazing", "fucking bullish", "fucking moon", "fucking based",
        "fucking chad", "fucking genius",
        # Price action
        "price action great", "fucking great", "price action is great",
        "price action is fucking great", "great price action",
        "amazing price action",
        # Moon and pump
        "moon", "lets moon", "pump it",
        # Emoji
        "🚀", "💎", "🤖", "🧠", "💪", "🔥", "💯", "⭐", "🌙", "🎯",
        "🫡", "🤝", "👑", "⚔️", "🛡️",
    ),
    bearish=(
        # General negative
        "terrible", "horrible", "awful", "dreadful", "disappointing",
        # Technical
        "centralized", "not scalable", "technical issues", "bugs",
        "security risks", "network problems", "implementation issues",
        # Market
        "overvalued", "bubble", "hype", "memecoin", "no utility",
        "dump", "sell pressure", "price manipulation", "whale games",
        # Project risk
        "vaporware", "abandoned", "no development", "lost autonomy",
        "failed experiment", "broken promises", "missed deadlines",
        # Competition
        "better alternatives", "competition", "market saturation",
        "obsolete technology", "outdated approach",
        # Trust
        "rug pull", "scam", "fake", "ponzi", "cash grab",
        "opportunistic launch", "quick flip",
        # Meme culture
        "ngmi", "rekt", "paper hands", "fud", "cope",
        # FUD phrases
        "weak hands", "ngmi energy", "fudders coping",
        "missing the vision", "paper hand mindset",
        "short term thinking", "lacks research", "casual take",
        "watching from sidelines", "crying later",
        "zoom out ser", "do more research", "read the docs",
        "check the github", "watch the spaces", "follow tim",
        "compare other ai tokens", "look at fundamentals",
        # Market slang
        "blows", "ass", "sodl", "boring af", "dead", "trash",
        # Profanity
        "fuck avb", "fucking avb", "fucking sucks", "fucking trash",
        "fucking dead", "fucking shit", "fucking ass", "fucking garbage",
        "fucking joke", "fucking scam",
        # Emoji
        "💀", "🏳️", "⚰️", "🤡", "🗑️", "📉", "⚠️",
    ),
    neutral=(
        "okay", "fine", "average", "moderate", "standard",
        "development update", "technical analysis", "implementation",
        "protocol design", "network architecture", "roadmap",
        "market cap", "volume", "liquidity", "price action",
        "trading range", "support levels", "resistance",
        "progress report", "milestone update", "development phase",
        "testing phase", "integration process", "protocol update",
        "research", "analysis", "investigation", "comparison",
        "documentation", "whitepaper", "technical spec",
        "dyor", "nfa", "smart contract", "blockchain", "algorithm",
        "dyor required", "check pinned", "join telegram",
        "watch latest space", "tim explained this",
        "community knows", "day 1s understand",
        "🤔", "⚖️", "📊", "🔄", "⏳", "📝", "🔍",
    ),
)
