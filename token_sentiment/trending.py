"""
Trending Ranker - Ranks tokens by a composite trend score.

trend_score = |change_percent| * ln(volume + 1)

change_percent compares the latest signal with the one before it
(or with itself when only one exists). Log-damped volume keeps large
tokens from dominating purely by size while low-sample tokens are
discounted.
"""

import logging
import math
from typing import Optional

from .history import HistoryStore
from .models import TokenSignal, TrendingEntry


logger = logging.getLogger(__name__)


def percent_change(previous: TokenSignal, latest: TokenSignal) -> float:
    """Score change in percent, with explicit guards for a zero base."""
    if previous.score != 0:
        return (latest.score - previous.score) / abs(previous.score) * 100
    if latest.score > 0:
        return 100.0
    if latest.score < 0:
        return -100.0
    return 0.0


def trend_score(change: float, volume: int) -> float:
    return abs(change) * math.log(volume + 1)


class TrendingRanker:
    """Computes the trending list on demand from the history store."""

    def __init__(self, store: HistoryStore, top_sources: int = 5) -> None:
        self.store = store
        self.top_sources = top_sources

    def rank(self, limit: int = 10) -> list[TrendingEntry]:
        """
        Top `limit` tokens by trend score, highest first.

        Tokens with no history are excluded. Ties keep store order.
        """
        if limit <= 0:
            return []

        entries: list[TrendingEntry] = []
        for token in self.store.tokens():
            pair = self.store.latest_pair(token)
            if pair is None:
                continue
            entries.append(self._entry(token, *pair))

        entries.sort(key=lambda e: e.trend_score, reverse=True)
        logger.debug(f"Ranked {len(entries)} tokens, returning top {limit}")
        return entries[:limit]

    def entry_for(self, token: str) -> Optional[TrendingEntry]:
        pair = self.store.latest_pair(token)
        if pair is None:
            return None
        return self._entry(token.upper(), *pair)

    def _entry(
        self,
        token: str,
        previous: TokenSignal,
        latest: TokenSignal,
    ) -> TrendingEntry:
        change = percent_change(previous, latest)
        return TrendingEntry(
            symbol=token,
            mentions=latest.volume,
            sentiment_score=latest.score,
            change_percent=change,
            trend_score=trend_score(change, latest.volume),
            top_sources=tuple(latest.sources[:self.top_sources]),
        )
