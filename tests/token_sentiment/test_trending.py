"""
Tests for Trending Ranker.

trend_score = |change_percent| * ln(volume + 1)
"""

import math

import pytest

from token_sentiment import HistoryStore, TokenSignal, TrendingRanker
from token_sentiment.trending import percent_change


def push(store: HistoryStore, token: str, score: int, volume: int = 1,
         sources: tuple = ()) -> None:
    store.append(TokenSignal(token=token, score=score, confidence=50,
                             volume=volume, sources=sources))


@pytest.fixture
def store():
    return HistoryStore()


@pytest.fixture
def ranker(store):
    return TrendingRanker(store)


# ============================================================
# TEST: PERCENT CHANGE
# ============================================================

class TestPercentChange:
    """Tests for change between the last two signals."""

    @pytest.mark.parametrize("previous,latest,expected", [
        (10, 20, 100.0),
        (10, 100, 900.0),
        (-20, -10, 50.0),
        (20, -20, -200.0),
        (0, 30, 100.0),
        (0, -5, -100.0),
        (0, 0, 0.0),
    ])
    def test_percent_change(self, previous, latest, expected):
        change = percent_change(
            TokenSignal(token="SOL", score=previous, confidence=0, volume=0),
            TokenSignal(token="SOL", score=latest, confidence=0, volume=0),
        )
        assert change == pytest.approx(expected)


# ============================================================
# TEST: RANKING
# ============================================================

class TestRanking:
    """Tests for the trending order."""

    def test_small_volume_large_change_wins(self, store, ranker):
        """A: 100 * ln(101) ~ 461.5; B: 900 * ln(3) ~ 988.8."""
        push(store, "AAA", 10)
        push(store, "AAA", 20, volume=100)
        push(store, "BBB", 10)
        push(store, "BBB", 100, volume=2)

        entries = ranker.rank(limit=10)

        assert [e.symbol for e in entries] == ["BBB", "AAA"]
        assert entries[0].trend_score == pytest.approx(900 * math.log(3))
        assert entries[1].trend_score == pytest.approx(100 * math.log(101))
        assert entries[1].change_percent == pytest.approx(100.0)
        assert entries[1].mentions == 100

    def test_zero_volume_ranks_last(self, store, ranker):
        push(store, "AAA", 10)
        push(store, "AAA", 20, volume=100)
        push(store, "BBB", 10)
        push(store, "BBB", 100, volume=0)

        entries = ranker.rank(limit=10)

        assert [e.symbol for e in entries] == ["AAA", "BBB"]
        assert entries[1].trend_score == 0.0

    def test_single_signal_has_no_change(self, store, ranker):
        push(store, "SOL", 40, volume=10)

        entries = ranker.rank(limit=10)

        assert len(entries) == 1
        assert entries[0].change_percent == 0.0
        assert entries[0].trend_score == 0.0

    def test_limit(self, store, ranker):
        for i, token in enumerate(("AAA", "BBB", "CCC")):
            push(store, token, 10)
            push(store, token, 20 + i * 10, volume=5)

        assert [e.symbol for e in ranker.rank(limit=2)] == ["CCC", "BBB"]
        assert ranker.rank(limit=0) == []

    def test_empty_store(self, ranker):
        assert ranker.rank() == []
        assert ranker.entry_for("SOL") is None

    def test_top_sources_are_first_five(self, store, ranker):
        sources = tuple(f"id{i}" for i in range(7))
        push(store, "SOL", 30, volume=7, sources=sources)

        entry = ranker.entry_for("sol")
        assert entry.top_sources == sources[:5]
        assert entry.to_dict()["top_sources"] == list(sources[:5])
