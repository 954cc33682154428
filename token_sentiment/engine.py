"""
Sentiment Engine - Batch scoring, aggregation and query facade.

Flow for one batch:
    extract tokens -> score each item once -> per token:
    [lock token] read previous -> aggregate -> append [unlock]

The engine performs no I/O. It owns its history store, so several
independent engines can coexist (one per test, one per market, ...).
"""

import logging
import threading
from typing import Any, Iterable, Mapping, Optional, Union

from .aggregator import TokenAggregator
from .alerts import AlertDetector
from .config import EngineConfig, get_config
from .extractor import TokenExtractor
from .history import HistoryStore
from .lexicon import Lexicon
from .models import (
    AlertSeverity,
    ItemScore,
    SentimentAlert,
    TextItem,
    TokenSignal,
    TrendingEntry,
    normalize_token,
)
from .scorer import ItemScorer
from .sources import BaseItemSource
from .trending import TrendingRanker


logger = logging.getLogger(__name__)


ItemLike = Union[TextItem, Mapping[str, Any]]


class SentimentEngine:
    """
    Per-token sentiment engine.

    Usage:
        engine = SentimentEngine()
        results = engine.process_batch(items)

        engine.current_signal("SOL")
        engine.history("SOL")
        engine.trending(limit=5)
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        config: Optional[EngineConfig] = None,
        store: Optional[HistoryStore] = None,
    ) -> None:
        self.config = config or get_config()
        if lexicon is None:
            lexicon = (
                Lexicon.from_yaml(self.config.lexicon_path)
                if self.config.lexicon_path else Lexicon()
            )
        self.lexicon = lexicon

        self.extractor = TokenExtractor(self.lexicon)
        self.scorer = ItemScorer(self.lexicon, self.config.weights)
        self.aggregator = TokenAggregator(self.scorer)
        self.store = store or HistoryStore(limit=self.config.history_limit)
        self.ranker = TrendingRanker(
            self.store,
            top_sources=self.config.trending_top_sources,
        )
        self.alert_detector = AlertDetector(self.config.alerts)

        self._stats_lock = threading.Lock()
        self._stats = {
            "batches_processed": 0,
            "items_processed": 0,
            "items_without_tokens": 0,
            "signals_published": 0,
            "sources_failed": 0,
        }

        logger.info(
            f"SentimentEngine initialized "
            f"({len(self.lexicon.tracked_tokens)} tracked tokens, "
            f"history_limit={self.store.limit})"
        )

    # ─────────────────────────────────────────────────────────────
    # Item-level operations
    # ─────────────────────────────────────────────────────────────

    def extract_tokens(self, text: str) -> set[str]:
        return self.extractor.extract(text)

    def score_item(self, item: ItemLike) -> ItemScore:
        coerced = self._coerce_item(item)
        if coerced is None:
            raise TypeError(f"Unsupported item type: {type(item).__name__}")
        return self.scorer.score(coerced)

    # ─────────────────────────────────────────────────────────────
    # Batch processing
    # ─────────────────────────────────────────────────────────────

    def process_batch(self, items: Iterable[ItemLike]) -> dict[str, TokenSignal]:
        """
        Extract, score, aggregate and store one batch.

        Never raises for batch content: malformed engagement data is
        treated as zero.

        Returns:
            Mapping of every token touched by the batch to its new signal
        """
        batch: list[TextItem] = []
        for raw in items:
            item = self._coerce_item(raw)
            if item is None:
                logger.warning(f"Skipping unsupported item type: {type(raw).__name__}")
                continue
            batch.append(item)

        scored: dict[str, list[tuple[TextItem, ItemScore]]] = {}
        without_tokens = 0
        for item in batch:
            item.tokens = sorted(self.extractor.extract(item.text))
            if not item.tokens:
                without_tokens += 1
                continue
            result = self.scorer.score(item)
            for token in item.tokens:
                scored.setdefault(token, []).append((item, result))

        results: dict[str, TokenSignal] = {}
        for token in sorted(scored):
            with self.store.token_lock(token):
                previous = self.store.current(token)
                signal = self.aggregator.aggregate_scored(
                    token, scored[token], previous,
                )
                self.store.append(signal)
            results[token] = signal

        with self._stats_lock:
            self._stats["batches_processed"] += 1
            self._stats["items_processed"] += len(batch)
            self._stats["items_without_tokens"] += without_tokens
            self._stats["signals_published"] += len(results)

        logger.debug(
            f"Processed batch: {len(batch)} items, "
            f"{len(results)} tokens, {without_tokens} without tokens"
        )
        return results

    async def ingest(self, source: BaseItemSource) -> dict[str, TokenSignal]:
        """
        Fetch one batch from a source and process it.

        A failing source yields an empty result instead of an error.
        """
        try:
            items = await source.fetch_items()
        except Exception as e:
            with self._stats_lock:
                self._stats["sources_failed"] += 1
            logger.warning(f"[{source.name}] Failed to fetch items: {e}")
            return {}

        logger.info(f"[{source.name}] Fetched {len(items)} items")
        return self.process_batch(items)

    # ─────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────

    def current_signal(self, token: str) -> Optional[TokenSignal]:
        """Latest signal for a token, or None if never computed."""
        return self.store.current(normalize_token(token))

    def history(self, token: str) -> list[TokenSignal]:
        """Retained signals for a token, oldest first."""
        return self.store.history(normalize_token(token))

    def trending(self, limit: Optional[int] = None) -> list[TrendingEntry]:
        if limit is None:
            limit = self.config.trending_default_limit
        return self.ranker.rank(limit)

    def current_signals(
        self,
        category: Optional[str] = None,
        min_volume: int = 0,
        min_confidence: int = 0,
    ) -> dict[str, TokenSignal]:
        """
        Current signal of every known token, optionally filtered.

        Raises:
            LexiconError: unknown category
        """
        signals = self.store.snapshot()

        if category:
            members = set(self.lexicon.tokens_in_category(category))
            signals = {t: s for t, s in signals.items() if t in members}
        if min_volume > 0:
            signals = {t: s for t, s in signals.items() if s.volume >= min_volume}
        if min_confidence > 0:
            signals = {
                t: s for t, s in signals.items() if s.confidence >= min_confidence
            }
        return signals

    def compare(self, tokens: Iterable[str]) -> dict[str, Optional[TokenSignal]]:
        """Current signals for several tokens side by side."""
        return {
            symbol: self.store.current(symbol)
            for symbol in (normalize_token(t) for t in tokens)
        }

    def alerts(
        self,
        severity: Optional[Union[AlertSeverity, str]] = None,
    ) -> list[SentimentAlert]:
        if isinstance(severity, str):
            severity = AlertSeverity(severity.lower())
        return self.alert_detector.detect(self.store.snapshot().values(), severity)

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Clear all history and statistics."""
        self.store.clear()
        with self._stats_lock:
            for key in self._stats:
                self._stats[key] = 0
        logger.info("SentimentEngine reset")

    def get_stats(self) -> dict[str, Any]:
        with self._stats_lock:
            stats = dict(self._stats)
        return {
            **stats,
            "tracked_tokens": len(self.lexicon.tracked_tokens),
            "history": self.store.get_stats(),
        }

    # ─────────────────────────────────────────────────────────────
    # Internal methods
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _coerce_item(item: Any) -> Optional[TextItem]:
        if isinstance(item, TextItem):
            return item
        if isinstance(item, Mapping):
            logger.debug(f"Coercing mapping into TextItem: id={item.get('id')!r}")
            return TextItem.from_dict(dict(item))
        return None
