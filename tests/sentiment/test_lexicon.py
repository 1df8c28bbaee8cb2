"""
Tests for SentimentLexicon.
"""

import dataclasses

import pytest

from sentiment.lexicon import DEFAULT_LEXICON, SentimentLexicon, term_weight


class TestSentimentLexicon:
    """Immutable, disjoint anchor sets."""

    def test_default_sets_are_disjoint(self):
        bullish = set(DEFAULT_LEXICON.bullish)
        bearish = set(DEFAULT_LEXICON.bearish)
        neutral = set(DEFAULT_LEXICON.neutral)
        assert not bullish & bearish
        assert not bullish & neutral
        assert not bearish & neutral

    def test_default_contains_core_terms(self):
        assert "amazing" in DEFAULT_LEXICON.bullish
        assert "🚀" in DEFAULT_LEXICON.bullish
        assert "terrible" in DEFAULT_LEXICON.bearish
        assert "💀" in DEFAULT_LEXICON.bearish
        assert "dyor" in DEFAULT_LEXICON.neutral

    def test_terms_are_case_folded_and_deduplicated(self):
        lexicon = SentimentLexicon(bullish=("Moon", "MOON", " moon "), bearish=("Dump",))
        assert lexicon.bullish == ("moon",)
        assert lexicon.bearish == ("dump",)

    def test_overlap_rejected(self):
        with pytest.raises(ValueError, match="disjoint"):
            SentimentLexicon(bullish=("moon",), bearish=("MOON",))

    def test_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_LEXICON.bullish = ()

    def test_all_terms(self):
        lexicon = SentimentLexicon(bullish=("a1",), bearish=("b1",), neutral=("n1",))
        assert lexicon.all_terms == ("a1", "b1", "n1")
        assert len(lexicon) == 3

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text(
            "lexicon:\n"
            "  bullish: [pamp, '🚀']\n"
            "  bearish: [damp]\n",
            encoding="utf-8",
        )
        lexicon = SentimentLexicon.from_yaml(path)
        assert lexicon.bullish == ("pamp", "🚀")
        assert lexicon.bearish == ("damp",)
        assert lexicon.neutral == ()


def test_term_weight():
    assert term_weight("moon") == 1.0
    assert term_weight("abcdef") == 1.0
    assert term_weight("amazing") == 1.5
