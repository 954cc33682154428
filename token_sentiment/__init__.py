"""
Token Sentiment Engine - Per-token social sentiment signals.

This package provides:
- Token extraction (cashtags and bare mentions of tracked symbols)
- Multi-signal item scoring (keywords with negation, emoji,
  engagement, followers, virality)
- Confidence-weighted aggregation into per-token signals
- Bounded per-token history with momentum
- Trending ranking and strong-move alerts

Usage:
    from token_sentiment import SentimentEngine, TextItem

    engine = SentimentEngine()
    results = engine.process_batch([
        TextItem(id="1", text="$SOL looking bullish 🚀", likes=500),
    ])

    signal = engine.current_signal("SOL")
    print(f"SOL: {signal.score} (confidence {signal.confidence})")

    for entry in engine.trending(limit=5):
        print(entry.symbol, entry.trend_score)

Output Schema:
- score: -100 (very bearish) to +100 (very bullish)
- confidence: 0 to 100
- volume: number of items that mentioned the token in the batch
- momentum: score change vs. the token's previous signal
"""

from .aggregator import TokenAggregator
from .alerts import AlertDetector
from .config import (
    AlertThresholds,
    EngineConfig,
    ScoringWeights,
    get_config,
    set_config,
)
from .engine import SentimentEngine
from .exceptions import (
    ConfigurationError,
    InvalidTokenError,
    LexiconError,
    SentimentEngineError,
)
from .extractor import TokenExtractor
from .history import HistoryStore
from .lexicon import Lexicon
from .models import (
    AlertSeverity,
    AlertType,
    ItemScore,
    ItemSignalBreakdown,
    SentimentAlert,
    SentimentCategory,
    SignalBreakdown,
    TextItem,
    TokenSignal,
    TradingSignal,
    TrendingEntry,
    normalize_token,
)
from .scorer import ItemScorer
from .sources import BaseItemSource, StaticItemSource
from .trending import TrendingRanker


__all__ = [
    # Engine
    "SentimentEngine",

    # Components
    "TokenExtractor",
    "ItemScorer",
    "TokenAggregator",
    "HistoryStore",
    "TrendingRanker",
    "AlertDetector",
    "Lexicon",

    # Sources
    "BaseItemSource",
    "StaticItemSource",

    # Configuration
    "EngineConfig",
    "ScoringWeights",
    "AlertThresholds",
    "get_config",
    "set_config",

    # Models
    "TextItem",
    "ItemScore",
    "ItemSignalBreakdown",
    "SignalBreakdown",
    "TokenSignal",
    "TrendingEntry",
    "SentimentAlert",
    "SentimentCategory",
    "TradingSignal",
    "AlertType",
    "AlertSeverity",
    "normalize_token",

    # Exceptions
    "SentimentEngineError",
    "ConfigurationError",
    "LexiconError",
    "InvalidTokenError",
]


# Version
__version__ = "1.0.0"
