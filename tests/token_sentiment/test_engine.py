"""
Tests for Sentiment Engine.

============================================================
TEST SCENARIOS
============================================================
1. Batch processing end to end (extract -> score -> aggregate -> store)
2. Momentum across consecutive batches
3. Queries: current, history, trending, compare, category filters
4. Invalid lookups raise InvalidTokenError
5. Reset clears all state
6. Async ingestion from an item source, including failures
7. Concurrent batches for the same token keep momentum consistent

============================================================
"""

import threading

import pytest

from token_sentiment import (
    AlertSeverity,
    BaseItemSource,
    EngineConfig,
    InvalidTokenError,
    LexiconError,
    SentimentEngine,
    StaticItemSource,
    TokenSignal,
)


@pytest.fixture
def sol_batch(make_item):
    """Two bullish SOL items and one negated one."""
    return [
        make_item("a", "$SOL bullish breakout"),
        make_item("b", "$SOL moon 🚀"),
        make_item("c", "$SOL is not bullish"),
    ]


@pytest.fixture
def engaged_sol_batch(make_item):
    """Two widely shared bullish SOL items and one barely seen negated one."""
    reach = dict(author_followers=200_000, likes=2_000, reshares=300, replies=100)
    return [
        make_item("a", "$SOL bullish breakout", **reach),
        make_item("b", "$SOL moon 🚀", **reach),
        make_item("c", "not bullish on $SOL", author_followers=200, likes=3),
    ]


class FailingSource(BaseItemSource):
    """Source whose fetch always raises."""

    @property
    def name(self) -> str:
        return "failing"

    async def fetch_items(self):
        raise RuntimeError("upstream unavailable")


# ============================================================
# TEST: BATCH PROCESSING
# ============================================================

class TestProcessBatch:
    """Tests for the full batch flow."""

    def test_aggregate_between_item_scores(self, engine, sol_batch):
        results = engine.process_batch(sol_batch)
        item_scores = [engine.score_item(item).score for item in sol_batch]

        signal = results["SOL"]
        assert min(item_scores) < signal.score < max(item_scores)
        assert signal.confidence > 0
        assert signal.volume == 3
        assert signal.sources == ("a", "b", "c")

    def test_aggregate_values(self, engine, sol_batch):
        """Items score 55 (c=22), 57 (c=22), -55 (c=5): weighted 21.89 / 0.49."""
        signal = engine.process_batch(sol_batch)["SOL"]

        assert signal.score == 45
        assert signal.confidence == 16
        assert signal.momentum == 0.0

    def test_engagement_weights_the_aggregate(self, engine, engaged_sol_batch):
        """High-reach bullish items dominate a low-reach negated one."""
        item_results = [engine.score_item(item) for item in engaged_sol_batch]
        assert [(r.score, r.confidence) for r in item_results] == [
            (55, 100), (57, 100), (-55, 5),
        ]

        signal = engine.process_batch(engaged_sol_batch)["SOL"]

        # (55 + 57 - 55 * 0.05) / 2.05 = 53.3; confidence 2.05 / 3
        assert -55 < signal.score < 55
        assert signal.score == 53
        assert signal.confidence == 68
        assert signal.volume == 3

    def test_items_are_tagged_with_tokens(self, engine, make_item):
        item = make_item("1", "$BONK and SOL both sending")
        engine.process_batch([item])
        assert item.tokens == ["BONK", "SOL"]

    def test_untracked_cashtag_gets_a_signal(self, engine, make_item):
        results = engine.process_batch([make_item("1", "$PEPE bullish")])
        assert results["PEPE"].score == 55

    def test_items_without_tokens(self, engine, make_item):
        results = engine.process_batch([make_item("1", "gm everyone")])

        assert results == {}
        assert engine.get_stats()["items_without_tokens"] == 1

    def test_mappings_accepted_and_bad_items_skipped(self, engine):
        results = engine.process_batch([
            {"id": "1", "text": "$SOL bullish", "likes": "oops"},
            42,
        ])

        assert results["SOL"].volume == 1
        assert engine.get_stats()["items_processed"] == 1

    def test_score_item_rejects_unsupported_type(self, engine):
        with pytest.raises(TypeError):
            engine.score_item(42)

    def test_momentum_across_batches(self, engine, sol_batch, make_item):
        first = engine.process_batch(sol_batch)["SOL"]
        second = engine.process_batch([make_item("d", "$SOL dump")])["SOL"]

        assert second.score == -55
        assert second.momentum == second.score - first.score
        assert engine.history("SOL") == [first, second]


# ============================================================
# TEST: QUERIES
# ============================================================

class TestQueries:
    """Tests for read operations."""

    def test_unknown_token(self, engine):
        assert engine.current_signal("SOL") is None
        assert engine.history("SOL") == []

    def test_invalid_token(self, engine):
        with pytest.raises(InvalidTokenError):
            engine.current_signal("not a token!")
        with pytest.raises(InvalidTokenError):
            engine.history("")

    def test_current_signal_case_insensitive(self, engine, sol_batch):
        engine.process_batch(sol_batch)
        assert engine.current_signal("sol").volume == 3

    def test_trending(self, engine, make_item):
        engine.process_batch([make_item("1", "$SOL bullish"), make_item("2", "$BONK bullish")])
        engine.process_batch([
            make_item("3", "$SOL bearish"),
            make_item("4", "$SOL dump"),
            make_item("5", "$BONK bullish moon"),
        ])

        entries = engine.trending()

        assert [e.symbol for e in entries] == ["SOL", "BONK"]
        assert entries[0].change_percent == pytest.approx(-200.0)
        assert entries[0].mentions == 2

    def test_compare(self, engine, sol_batch):
        engine.process_batch(sol_batch)
        result = engine.compare(["sol", "BONK"])

        assert result["SOL"].volume == 3
        assert result["BONK"] is None

    def test_current_signals_filters(self, engine, sol_batch, make_item):
        engine.process_batch(sol_batch + [make_item("d", "$BONK bullish")])

        assert set(engine.current_signals()) == {"SOL", "BONK"}
        assert set(engine.current_signals(category="l1")) == {"SOL"}
        assert set(engine.current_signals(min_volume=2)) == {"SOL"}
        assert set(engine.current_signals(min_confidence=100)) == set()

    def test_current_signals_unknown_category(self, engine):
        with pytest.raises(LexiconError):
            engine.current_signals(category="nfts")

    def test_alerts(self, engine):
        engine.store.append(TokenSignal(token="SOL", score=90, confidence=80, volume=5))
        engine.store.append(TokenSignal(token="JUP", score=-60, confidence=70, volume=5))
        engine.store.append(TokenSignal(token="WIF", score=10, confidence=90, volume=5))

        alerts = engine.alerts()

        assert [a.token for a in alerts] == ["SOL", "JUP"]
        assert [a.token for a in engine.alerts("low")] == ["JUP"]
        assert [a.token for a in engine.alerts(AlertSeverity.HIGH)] == ["SOL"]


# ============================================================
# TEST: LIFECYCLE
# ============================================================

class TestLifecycle:
    """Tests for reset, stats and configuration wiring."""

    def test_reset(self, engine, sol_batch):
        engine.process_batch(sol_batch)
        engine.reset()

        assert engine.current_signal("SOL") is None
        assert engine.history("SOL") == []
        assert engine.trending() == []
        assert engine.get_stats()["batches_processed"] == 0

    def test_history_limit_from_config(self, make_item):
        engine = SentimentEngine(config=EngineConfig(history_limit=2))
        for i in range(3):
            engine.process_batch([make_item(str(i), "$SOL bullish")])

        assert [s.sources for s in engine.history("SOL")] == [("1",), ("2",)]

    def test_lexicon_loaded_from_config_path(self, tmp_path, make_item):
        path = tmp_path / "lexicon.yaml"
        path.write_text("tracked_tokens: [GO]\n", encoding="utf-8")
        engine = SentimentEngine(config=EngineConfig(lexicon_path=str(path)))

        assert engine.extract_tokens("go GOLDMAN sol") == {"GO"}

    def test_stats(self, engine, sol_batch):
        engine.process_batch(sol_batch)
        stats = engine.get_stats()

        assert stats["batches_processed"] == 1
        assert stats["items_processed"] == 3
        assert stats["signals_published"] == 1
        assert stats["history"]["signals_stored"] == 1


# ============================================================
# TEST: ASYNC INGESTION
# ============================================================

class TestIngest:
    """Tests for fetching batches from item sources."""

    @pytest.mark.asyncio
    async def test_ingest_static_source(self, engine, sol_batch):
        source = StaticItemSource(sol_batch, name="fixture")
        results = await engine.ingest(source)

        assert results["SOL"].volume == 3
        await source.close()

    @pytest.mark.asyncio
    async def test_failing_source_yields_empty_batch(self, engine):
        results = await engine.ingest(FailingSource())

        assert results == {}
        assert engine.get_stats()["sources_failed"] == 1
        assert engine.current_signal("SOL") is None


# ============================================================
# TEST: CONCURRENCY
# ============================================================

class TestConcurrency:
    """Tests for concurrent batches on the same token."""

    def test_momentum_refers_to_true_predecessor(self, engine, make_item):
        texts = ["$SOL bullish", "$SOL dump", "$SOL moon 🚀🚀", "$SOL is not bullish"]

        def worker(n: int):
            for i in range(25):
                text = texts[(n + i) % len(texts)]
                engine.process_batch([make_item(f"{n}-{i}", text)])

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        history = engine.history("SOL")
        assert len(history) == 100
        assert history[0].momentum == 0.0
        for previous, current in zip(history, history[1:]):
            assert current.momentum == current.score - previous.score
