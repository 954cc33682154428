"""
Item Scorer - Multi-signal sentiment score for a single text item.

============================================================
SIGNALS
============================================================
1. Keyword polarity with negation look-back
2. Emoji polarity
3. Engagement multiplier
4. Follower weight
5. Virality bonus (engagement relative to audience)

============================================================
OUTPUT
============================================================
ItemScore:
- score: int (-100 to 100)
- confidence: int (0 to 100)
- breakdown: ItemSignalBreakdown

Scoring is a pure function of the item: no shared mutable state,
safe to call from multiple threads.

============================================================
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import ScoringWeights, get_config
from .lexicon import Lexicon
from .models import (
    MAX_CONFIDENCE,
    MAX_SCORE,
    MIN_CONFIDENCE,
    MIN_SCORE,
    ItemScore,
    ItemSignalBreakdown,
    TextItem,
)
from .utils import clamp, round2, round_half_up, sign


logger = logging.getLogger(__name__)


WORD_PATTERN = re.compile(r"\w+")


@dataclass(frozen=True)
class KeywordTally:
    """Accumulated keyword weight for one item."""
    bullish: float = 0.0
    bearish: float = 0.0

    @property
    def total(self) -> float:
        return self.bullish + self.bearish

    @property
    def score(self) -> float:
        if self.total <= 0:
            return 0.0
        return (self.bullish - self.bearish) / self.total * 100


class ItemScorer:
    """
    Computes a signed score and confidence for one item.

    Usage:
        scorer = ItemScorer()
        result = scorer.score(item)
        print(result.score, result.confidence)
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        weights: Optional[ScoringWeights] = None,
    ) -> None:
        self.lexicon = lexicon or Lexicon()
        self.weights = weights or get_config().weights
        self._negations = frozenset(self.lexicon.negation_words)
        # Single words match whole-word; phrases and emoji match as substrings
        self._word_patterns: dict[str, re.Pattern] = {
            keyword: re.compile(rf"\b{re.escape(keyword)}\b")
            for keyword in (
                *self.lexicon.bullish_keywords,
                *self.lexicon.bearish_keywords,
            )
            if WORD_PATTERN.fullmatch(keyword)
        }

    # ─────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────

    def score(self, item: TextItem) -> ItemScore:
        """Score one item. Never raises for malformed engagement data."""
        w = self.weights
        text = (item.text or "").lower()
        words = text.split()

        tally = self.keyword_tally(text, words)
        keyword_score = tally.score
        emoji_score = self.emoji_score(text)

        engagement_sum = item.engagement_sum
        followers = item.followers
        engagement = min(engagement_sum / w.engagement_divisor, w.engagement_cap)
        follower_weight = min(1 + followers / w.follower_divisor, w.follower_cap)
        virality = self.virality_bonus(engagement_sum, followers)

        raw_score = (
            keyword_score * w.keyword_weight
            + emoji_score * w.emoji_weight
            + virality * sign(keyword_score) * w.virality_weight
        )
        score = int(clamp(round_half_up(raw_score), MIN_SCORE, MAX_SCORE))

        base_confidence = 0.0
        if tally.total > 0:
            base_confidence = min(tally.total * w.confidence_per_hit, 100)
        confidence = base_confidence * (
            (1 + engagement * w.confidence_engagement_factor)
            * (follower_weight * w.confidence_follower_factor)
        )
        confidence = int(clamp(round_half_up(confidence), MIN_CONFIDENCE, MAX_CONFIDENCE))

        breakdown = ItemSignalBreakdown(
            keyword_score=round_half_up(keyword_score),
            emoji_score=emoji_score,
            engagement_multiplier=round2(engagement),
            follower_weight=round2(follower_weight),
            virality_bonus=round2(virality),
            score=score,
            confidence=confidence,
        )
        return ItemScore(score=score, confidence=confidence, breakdown=breakdown)

    # ─────────────────────────────────────────────────────────────
    # Signals
    # ─────────────────────────────────────────────────────────────

    def keyword_tally(self, text: str, words: Sequence[str]) -> KeywordTally:
        """
        Weigh bullish and bearish keyword hits.

        A negated hit counts toward the opposite polarity at
        negation_weight. High-conviction phrases are never inverted.
        """
        w = self.weights
        bullish = 0.0
        bearish = 0.0

        for keyword in self.lexicon.bullish_keywords:
            if not self._present(text, keyword):
                continue
            if self._is_negated(words, self._position(words, keyword)):
                bearish += w.negation_weight
            else:
                bullish += w.keyword_hit_weight

        for keyword in self.lexicon.bearish_keywords:
            if not self._present(text, keyword):
                continue
            if self._is_negated(words, self._position(words, keyword)):
                bullish += w.negation_weight
            else:
                bearish += w.keyword_hit_weight

        for phrase in self.lexicon.high_conviction_bullish:
            if phrase in text:
                bullish += w.high_conviction_weight
        for phrase in self.lexicon.high_conviction_bearish:
            if phrase in text:
                bearish += w.high_conviction_weight

        return KeywordTally(bullish=bullish, bearish=bearish)

    def emoji_score(self, text: str) -> float:
        w = self.weights
        bullish = sum(text.count(e) for e in self.lexicon.bullish_emojis)
        bearish = sum(text.count(e) for e in self.lexicon.bearish_emojis)
        return clamp(w.emoji_unit * (bullish - bearish), -w.emoji_cap, w.emoji_cap)

    def virality_bonus(self, engagement_sum: float, followers: int) -> float:
        w = self.weights
        if followers <= 0:
            return 0.0
        ratio = engagement_sum / followers
        if ratio <= w.virality_threshold:
            return 0.0
        return min(ratio * w.virality_scale, w.virality_cap)

    # ─────────────────────────────────────────────────────────────
    # Internal methods
    # ─────────────────────────────────────────────────────────────

    def _present(self, text: str, keyword: str) -> bool:
        pattern = self._word_patterns.get(keyword)
        if pattern is not None:
            return pattern.search(text) is not None
        return keyword in text

    def _position(self, words: Sequence[str], keyword: str) -> int:
        """
        Word index of a keyword, or -1 if it cannot be located.

        Exact word first, then the start of a multi-word phrase, then the
        first word containing the keyword (as a whole word when the
        keyword is a single word).
        """
        for i, word in enumerate(words):
            if word == keyword:
                return i

        parts = keyword.split()
        if len(parts) > 1:
            n = len(parts)
            for i in range(len(words) - n + 1):
                if list(words[i:i + n]) == parts:
                    return i
            keyword = parts[0]

        for i, word in enumerate(words):
            if self._present(word, keyword):
                return i
        return -1

    def _is_negated(self, words: Sequence[str], position: int) -> bool:
        if position < 0:
            return False
        start = max(0, position - self.weights.negation_window)
        return any(words[i] in self._negations for i in range(start, position))
