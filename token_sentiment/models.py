"""
Token Sentiment Models - Items, per-item breakdowns and token signals.

Score range: -100 (very bearish) to +100 (very bullish).
Confidence range: 0 to 100.

TokenSignal is immutable. A signal is only ever published fully formed,
so readers never observe a partially built one.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .exceptions import InvalidTokenError
from .utils import as_count, clamp, round_half_up


TOKEN_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")

MIN_SCORE = -100
MAX_SCORE = 100
MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100


def normalize_token(symbol: Any) -> str:
    """
    Upper-case and validate a token symbol.

    Raises:
        InvalidTokenError: symbol is not 1-10 alphanumeric characters
    """
    if not isinstance(symbol, str):
        raise InvalidTokenError("Token symbol must be a string", token=symbol)
    normalized = symbol.strip().upper()
    if not TOKEN_SYMBOL_PATTERN.match(normalized):
        raise InvalidTokenError(
            "Token must be 1-10 alphanumeric characters",
            token=symbol,
        )
    return normalized


class SentimentCategory(Enum):
    """Interpretation of an aggregate score."""
    VERY_BEARISH = "very_bearish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
    BULLISH = "bullish"
    VERY_BULLISH = "very_bullish"

    @classmethod
    def from_score(cls, score: int) -> "SentimentCategory":
        if score >= 60:
            return cls.VERY_BULLISH
        elif score >= 20:
            return cls.BULLISH
        elif score >= -20:
            return cls.NEUTRAL
        elif score >= -60:
            return cls.BEARISH
        else:
            return cls.VERY_BEARISH


class TradingSignal(Enum):
    """Coarse action label derived from score, confidence and volume."""
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"
    INSUFFICIENT_DATA = "insufficient_data"


class AlertType(Enum):
    BULLISH_SURGE = "bullish_surge"
    BEARISH_DUMP = "bearish_dump"


class AlertSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


@dataclass
class TextItem:
    """
    One short social post with author and engagement metadata.

    Created by the fetching collaborator. `tokens` is attached once by the
    engine during batch processing and is read-only afterwards.
    """
    id: str
    text: str
    author: str = "unknown"
    author_followers: int = 0
    likes: int = 0
    reshares: int = 0
    replies: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    tokens: list[str] = field(default_factory=list)

    @property
    def followers(self) -> int:
        return as_count(self.author_followers)

    @property
    def engagement_sum(self) -> float:
        """likes + 2*reshares + 0.5*replies, with malformed counts as zero."""
        return (
            as_count(self.likes)
            + as_count(self.reshares) * 2
            + as_count(self.replies) * 0.5
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "author_followers": self.followers,
            "likes": as_count(self.likes),
            "reshares": as_count(self.reshares),
            "replies": as_count(self.replies),
            "created_at": self.created_at.isoformat(),
            "tokens": list(self.tokens),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TextItem":
        """Build an item from a loosely shaped mapping."""
        item_id = data.get("id")
        created = data.get("created_at") or data.get("timestamp")
        if isinstance(created, str):
            try:
                created_at = datetime.fromisoformat(created.replace("Z", "+00:00"))
            except ValueError:
                created_at = datetime.utcnow()
        elif isinstance(created, datetime):
            created_at = created
        else:
            created_at = datetime.utcnow()

        return cls(
            id="" if item_id is None else str(item_id),
            text=str(data.get("text") or ""),
            author=str(data.get("author") or "unknown"),
            author_followers=as_count(data.get("author_followers")),
            likes=as_count(data.get("likes")),
            reshares=as_count(data.get("reshares", data.get("retweets"))),
            replies=as_count(data.get("replies")),
            created_at=created_at,
            tokens=list(data.get("tokens") or []),
        )


@dataclass(frozen=True)
class ItemSignalBreakdown:
    """Per-item signal values. Never retained beyond one batch."""
    keyword_score: float
    emoji_score: float
    engagement_multiplier: float
    follower_weight: float
    virality_bonus: float
    score: int
    confidence: int


@dataclass(frozen=True)
class ItemScore:
    """Output of scoring one item."""
    score: int
    confidence: int
    breakdown: ItemSignalBreakdown

    @property
    def weight(self) -> float:
        return self.confidence / 100


@dataclass(frozen=True)
class SignalBreakdown:
    """Confidence-weighted average of item signals for one token signal."""
    keyword_score: float = 0.0
    emoji_score: float = 0.0
    engagement_multiplier: float = 0.0
    follower_weight: float = 0.0
    virality_bonus: float = 0.0
    momentum: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "keyword_score": self.keyword_score,
            "emoji_score": self.emoji_score,
            "engagement_multiplier": self.engagement_multiplier,
            "follower_weight": self.follower_weight,
            "virality_bonus": self.virality_bonus,
            "momentum": self.momentum,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SignalBreakdown":
        return cls(
            keyword_score=float(data.get("keyword_score", 0.0)),
            emoji_score=float(data.get("emoji_score", 0.0)),
            engagement_multiplier=float(data.get("engagement_multiplier", 0.0)),
            follower_weight=float(data.get("follower_weight", 0.0)),
            virality_bonus=float(data.get("virality_bonus", 0.0)),
            momentum=float(data.get("momentum", 0.0)),
        )


@dataclass(frozen=True)
class TokenSignal:
    """
    Aggregate sentiment for one token at one point in time.

    score: -100 to +100, confidence: 0 to 100, volume: contributing items.
    Out-of-range score/confidence values are clamped on construction.
    """
    token: str
    score: int
    confidence: int
    volume: int
    timestamp: datetime = field(default_factory=datetime.utcnow)
    sources: tuple[str, ...] = ()
    breakdown: Optional[SignalBreakdown] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "token", normalize_token(self.token))
        object.__setattr__(
            self, "score",
            int(clamp(round_half_up(self.score), MIN_SCORE, MAX_SCORE)),
        )
        object.__setattr__(
            self, "confidence",
            int(clamp(round_half_up(self.confidence), MIN_CONFIDENCE, MAX_CONFIDENCE)),
        )
        object.__setattr__(self, "volume", max(0, int(self.volume)))
        object.__setattr__(self, "sources", tuple(self.sources))

    @property
    def momentum(self) -> float:
        return self.breakdown.momentum if self.breakdown else 0.0

    @property
    def category(self) -> SentimentCategory:
        return SentimentCategory.from_score(self.score)

    @property
    def trading_signal(self) -> TradingSignal:
        if self.confidence < 30 or self.volume < 3:
            return TradingSignal.INSUFFICIENT_DATA
        if self.score >= 60 and self.confidence >= 60:
            return TradingSignal.STRONG_BUY
        if self.score >= 30 and self.confidence >= 40:
            return TradingSignal.BUY
        if self.score <= -60 and self.confidence >= 60:
            return TradingSignal.STRONG_SELL
        if self.score <= -30 and self.confidence >= 40:
            return TradingSignal.SELL
        return TradingSignal.HOLD

    @classmethod
    def empty(cls, token: str) -> "TokenSignal":
        """Zero signal for a token with no contributing items."""
        return cls(token=token, score=0, confidence=0, volume=0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "token": self.token,
            "score": self.score,
            "confidence": self.confidence,
            "volume": self.volume,
            "timestamp": self.timestamp.isoformat(),
            "sources": list(self.sources),
            "signals": self.breakdown.to_dict() if self.breakdown else None,
            "interpretation": self.category.value,
            "signal": self.trading_signal.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenSignal":
        """Create from dictionary."""
        signals = data.get("signals")
        timestamp = data.get("timestamp")
        return cls(
            token=data["token"],
            score=int(data.get("score", 0)),
            confidence=int(data.get("confidence", 0)),
            volume=int(data.get("volume", 0)),
            timestamp=(
                datetime.fromisoformat(timestamp) if timestamp else datetime.utcnow()
            ),
            sources=tuple(data.get("sources", ())),
            breakdown=SignalBreakdown.from_dict(signals) if signals else None,
        )


@dataclass(frozen=True)
class TrendingEntry:
    """One row of the trending ranking, computed on demand."""
    symbol: str
    mentions: int
    sentiment_score: int
    change_percent: float
    trend_score: float
    top_sources: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "mentions": self.mentions,
            "sentiment_score": self.sentiment_score,
            "change_percent": self.change_percent,
            "trend_score": self.trend_score,
            "top_sources": list(self.top_sources),
        }


@dataclass(frozen=True)
class SentimentAlert:
    """Strong directional sentiment on a token."""
    token: str
    alert_type: AlertType
    severity: AlertSeverity
    score: int
    confidence: int
    volume: int
    message: str
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "type": self.alert_type.value,
            "severity": self.severity.value,
            "score": self.score,
            "confidence": self.confidence,
            "volume": self.volume,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
