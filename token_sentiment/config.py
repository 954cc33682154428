"""
Token Sentiment - Configuration.

============================================================
TUNABLE SCORING POLICY
============================================================

The weighting constants below are empirically chosen policy, not
derived values. Their role in the scoring formula is fixed; their
values are configurable:
- Signal combination weights (keyword / emoji / virality)
- Negation look-back window and inverted weight
- Engagement, follower and virality scaling
- History retention and alert thresholds

Configuration can be loaded from:
- Default values
- Environment variables (SENTIMENT_*)
- YAML config file

============================================================
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)


# =============================================================
# SCORING WEIGHTS
# =============================================================


@dataclass
class ScoringWeights:
    """
    Per-item scoring constants.

    rawScore = keyword * keyword_weight
             + emoji * emoji_weight
             + virality * sign(keyword) * virality_weight
    """
    keyword_weight: float = 0.55
    emoji_weight: float = 0.15
    virality_weight: float = 0.1

    # Keyword signal
    negation_window: int = 3
    negation_weight: float = 0.5
    keyword_hit_weight: float = 1.0
    high_conviction_weight: float = 2.0

    # Emoji signal
    emoji_unit: float = 10.0
    emoji_cap: float = 50.0

    # Engagement: likes + 2*reshares + 0.5*replies
    engagement_divisor: float = 500.0
    engagement_cap: float = 3.0

    # Follower weight: min(1 + followers / divisor, cap)
    follower_divisor: float = 100_000.0
    follower_cap: float = 2.5

    # Virality: engagement / followers above threshold
    virality_threshold: float = 0.05
    virality_scale: float = 100.0
    virality_cap: float = 20.0

    # Confidence
    confidence_per_hit: float = 18.0
    confidence_engagement_factor: float = 0.3
    confidence_follower_factor: float = 0.6

    def __post_init__(self) -> None:
        """Validate weights."""
        if isinstance(self.negation_window, bool) or not isinstance(
            self.negation_window, int
        ):
            raise ConfigurationError(
                "negation_window must be an integer word count",
                field_name="negation_window",
                value=self.negation_window,
            )
        for name in (
            "engagement_divisor", "follower_divisor", "virality_scale",
        ):
            if getattr(self, name) <= 0:
                raise ConfigurationError(
                    f"{name} must be > 0",
                    field_name=name,
                    value=getattr(self, name),
                )
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ConfigurationError(
                    f"{f.name} must not be negative",
                    field_name=f.name,
                    value=value,
                )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# =============================================================
# ALERT THRESHOLDS
# =============================================================


@dataclass
class AlertThresholds:
    """
    Thresholds for strong-move alerts.

    - alert:   |score| > min_abs_score and confidence > min_confidence
    - HIGH:    |score| > high_abs_score
    - MEDIUM:  |score| > medium_abs_score
    - LOW:     otherwise
    """
    min_abs_score: int = 50
    min_confidence: int = 50
    medium_abs_score: int = 65
    high_abs_score: int = 80

    def __post_init__(self) -> None:
        if not self.min_abs_score <= self.medium_abs_score <= self.high_abs_score:
            raise ConfigurationError(
                "alert thresholds must satisfy min <= medium <= high",
                field_name="alerts",
                value=self.to_dict(),
            )

    def to_dict(self) -> dict[str, int]:
        return {
            "min_abs_score": self.min_abs_score,
            "min_confidence": self.min_confidence,
            "medium_abs_score": self.medium_abs_score,
            "high_abs_score": self.high_abs_score,
        }


# =============================================================
# MAIN CONFIGURATION
# =============================================================


@dataclass
class EngineConfig:
    """Main configuration for the sentiment engine."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    alerts: AlertThresholds = field(default_factory=AlertThresholds)

    # History
    history_limit: int = 500

    # Trending
    trending_default_limit: int = 10
    trending_top_sources: int = 5

    # Optional lexicon override file
    lexicon_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ConfigurationError(
                "history_limit must be >= 1",
                field_name="history_limit",
                value=self.history_limit,
            )
        if self.trending_top_sources < 0:
            raise ConfigurationError(
                "trending_top_sources must be >= 0",
                field_name="trending_top_sources",
                value=self.trending_top_sources,
            )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - SENTIMENT_KEYWORD_WEIGHT
        - SENTIMENT_EMOJI_WEIGHT
        - SENTIMENT_VIRALITY_WEIGHT
        - SENTIMENT_NEGATION_WINDOW
        - SENTIMENT_NEGATION_WEIGHT
        - SENTIMENT_HIGH_CONVICTION_WEIGHT
        - SENTIMENT_HISTORY_LIMIT
        - SENTIMENT_TRENDING_LIMIT
        - SENTIMENT_LEXICON_PATH
        """
        weights = ScoringWeights()
        try:
            if os.getenv("SENTIMENT_KEYWORD_WEIGHT"):
                weights.keyword_weight = float(os.getenv("SENTIMENT_KEYWORD_WEIGHT"))
            if os.getenv("SENTIMENT_EMOJI_WEIGHT"):
                weights.emoji_weight = float(os.getenv("SENTIMENT_EMOJI_WEIGHT"))
            if os.getenv("SENTIMENT_VIRALITY_WEIGHT"):
                weights.virality_weight = float(os.getenv("SENTIMENT_VIRALITY_WEIGHT"))
            if os.getenv("SENTIMENT_NEGATION_WINDOW"):
                weights.negation_window = int(os.getenv("SENTIMENT_NEGATION_WINDOW"))
            if os.getenv("SENTIMENT_NEGATION_WEIGHT"):
                weights.negation_weight = float(os.getenv("SENTIMENT_NEGATION_WEIGHT"))
            if os.getenv("SENTIMENT_HIGH_CONVICTION_WEIGHT"):
                weights.high_conviction_weight = float(
                    os.getenv("SENTIMENT_HIGH_CONVICTION_WEIGHT")
                )

            history_limit = int(os.getenv("SENTIMENT_HISTORY_LIMIT", "500"))
            trending_limit = int(os.getenv("SENTIMENT_TRENDING_LIMIT", "10"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid SENTIMENT_* environment value: {e}") from e

        # Re-run validation on values assigned after construction
        weights = ScoringWeights(**weights.to_dict())

        return cls(
            weights=weights,
            history_limit=history_limit,
            trending_default_limit=trending_limit,
            lexicon_path=os.getenv("SENTIMENT_LEXICON_PATH") or None,
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EngineConfig":
        """
        Load configuration from a YAML file.

        Raises:
            ConfigurationError: file unreadable or values invalid
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        known_weights = {f.name for f in fields(ScoringWeights)}
        known_alerts = {f.name for f in fields(AlertThresholds)}

        weights_data = data.get("weights") or {}
        alerts_data = data.get("alerts") or {}
        ignored = (set(weights_data) - known_weights) | (set(alerts_data) - known_alerts)
        if ignored:
            logger.warning(f"Ignoring unknown config keys: {sorted(ignored)}")

        try:
            return cls(
                weights=ScoringWeights(**{
                    k: v for k, v in weights_data.items() if k in known_weights
                }),
                alerts=AlertThresholds(**{
                    k: v for k, v in alerts_data.items() if k in known_alerts
                }),
                history_limit=int(data.get("history_limit", 500)),
                trending_default_limit=int(data.get("trending_default_limit", 10)),
                trending_top_sources=int(data.get("trending_top_sources", 5)),
                lexicon_path=data.get("lexicon_path"),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid config value: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "weights": self.weights.to_dict(),
            "alerts": self.alerts.to_dict(),
            "history_limit": self.history_limit,
            "trending_default_limit": self.trending_default_limit,
            "trending_top_sources": self.trending_top_sources,
            "lexicon_path": self.lexicon_path,
        }


# =============================================================
# GLOBAL CONFIG SINGLETON
# =============================================================


_default_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _default_config
    if _default_config is None:
        _default_config = EngineConfig.from_env()
    return _default_config


def set_config(config: Optional[EngineConfig]) -> None:
    """Set (or clear, with None) the global engine configuration."""
    global _default_config
    _default_config = config
