"""
Token Aggregator - Folds all items mentioning a token into one signal.

Each item is weighted by its own confidence (confidence / 100):
- score      = round(sum(score * w) / sum(w))
- confidence = round(sum(w) / n * 100)
- breakdown  = the same weighted average per signal component
- momentum   = score - previous stored score (0 for a first signal)

A token with no contributing items gets the zero signal.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from .models import ItemScore, SignalBreakdown, TextItem, TokenSignal
from .scorer import ItemScorer
from .utils import round2, round_half_up


logger = logging.getLogger(__name__)


BREAKDOWN_FIELDS = (
    "keyword_score",
    "emoji_score",
    "engagement_multiplier",
    "follower_weight",
    "virality_bonus",
)


class TokenAggregator:
    """Confidence-weighted aggregation of item scores per token."""

    def __init__(self, scorer: Optional[ItemScorer] = None) -> None:
        self.scorer = scorer or ItemScorer()

    def aggregate(
        self,
        token: str,
        items: Iterable[TextItem],
        previous: Optional[TokenSignal] = None,
    ) -> TokenSignal:
        """
        Aggregate the items referencing `token` into a TokenSignal.

        Args:
            token: Token symbol
            items: Items from one batch; only those referencing the token count
            previous: The token's most recent stored signal, for momentum

        Returns:
            Fully formed TokenSignal
        """
        symbol = token.upper()
        scored = [
            (item, self.scorer.score(item))
            for item in items
            if symbol in item.tokens
        ]
        return self.aggregate_scored(symbol, scored, previous)

    def aggregate_scored(
        self,
        token: str,
        scored: Sequence[tuple[TextItem, ItemScore]],
        previous: Optional[TokenSignal] = None,
    ) -> TokenSignal:
        """Aggregate items that were already scored for this token."""
        symbol = token.upper()
        if not scored:
            return TokenSignal.empty(symbol)

        total_score = 0.0
        total_weight = 0.0
        component_sums = dict.fromkeys(BREAKDOWN_FIELDS, 0.0)
        sources: list[str] = []

        for item, result in scored:
            weight = result.weight
            total_score += result.score * weight
            total_weight += weight
            sources.append(item.id)

            for name in BREAKDOWN_FIELDS:
                component_sums[name] += getattr(result.breakdown, name) * weight

        if total_weight > 0:
            avg_score = total_score / total_weight
            avg_confidence = total_weight / len(scored) * 100
            components = {
                name: round2(value / total_weight)
                for name, value in component_sums.items()
            }
        else:
            avg_score = 0.0
            avg_confidence = 0.0
            components = dict.fromkeys(BREAKDOWN_FIELDS, 0.0)

        score = round_half_up(avg_score)
        momentum = float(score - previous.score) if previous is not None else 0.0

        signal = TokenSignal(
            token=symbol,
            score=score,
            confidence=round_half_up(avg_confidence),
            volume=len(scored),
            timestamp=datetime.utcnow(),
            sources=tuple(sources),
            breakdown=SignalBreakdown(momentum=momentum, **components),
        )

        logger.debug(
            f"Aggregated {symbol}: score={signal.score} "
            f"confidence={signal.confidence} volume={signal.volume} "
            f"momentum={momentum:+.0f}"
        )
        return signal
