"""
Token Sentiment Lexicon - Tracked tokens and scoring vocabularies.

============================================================
CONTENTS
============================================================
- Tracked token symbols and their categories
- Bullish / bearish keywords (words, phrases and emoji glyphs)
- High-conviction phrases (double weight, never negated)
- Negation words
- Bullish / bearish emoji sets for the emoji signal

The lexicon is loaded once and treated as immutable for the lifetime
of an engine. Overrides can be supplied as a YAML document with the
same field names as `Lexicon`.

============================================================
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from .exceptions import InvalidTokenError, LexiconError
from .models import normalize_token


logger = logging.getLogger(__name__)


TRACKED_TOKENS: tuple[str, ...] = (
    "SOL", "BTC", "ETH", "BONK", "WIF", "JUP", "JTO", "PYTH", "RAY",
    "ORCA", "MNDE", "SAMO", "BOME", "POPCAT", "MEW", "MYRO", "SLERF",
    "FWOG", "GOAT", "AI16Z", "GRIFFAIN", "ZEREBRO", "USDC", "USDT",
)

TOKEN_CATEGORIES: dict[str, tuple[str, ...]] = {
    "l1": ("SOL", "BTC", "ETH"),
    "defi": ("JUP", "JTO", "PYTH", "RAY", "ORCA", "MNDE"),
    "memecoin": (
        "BONK", "WIF", "SAMO", "BOME", "POPCAT", "MEW", "MYRO",
        "SLERF", "FWOG", "GOAT",
    ),
    "ai": ("AI16Z", "GRIFFAIN", "ZEREBRO"),
    "stablecoin": ("USDC", "USDT"),
}

BULLISH_KEYWORDS: tuple[str, ...] = (
    "bullish", "moon", "pump", "buy", "long", "breakout", "ath",
    "gem", "undervalued", "accumulate", "hodl", "wagmi", "gm",
    "lfg", "send it", "to the moon", "🚀", "📈", "💎", "🔥",
)

BEARISH_KEYWORDS: tuple[str, ...] = (
    "bearish", "dump", "sell", "short", "crash", "rug", "scam",
    "overvalued", "dead", "ngmi", "rekt", "exit", "top signal",
    "bubble", "ponzi", "📉", "💀", "🔻",
)

HIGH_CONVICTION_BULLISH: tuple[str, ...] = (
    "all in", "loading up", "generational buy", "accumulating heavily",
    "strong buy", "back up the truck",
)

HIGH_CONVICTION_BEARISH: tuple[str, ...] = (
    "full capitulation", "rug pull", "exit liquidity", "get out now",
    "strong sell", "going to zero",
)

NEGATION_WORDS: tuple[str, ...] = (
    "not", "no", "never", "don't", "dont", "isn't", "isnt", "aren't",
    "arent", "wasn't", "wasnt", "won't", "wont", "can't", "cant",
    "cannot", "neither", "nor", "hardly", "without",
)

BULLISH_EMOJIS: tuple[str, ...] = (
    "🚀", "📈", "💎", "🔥", "💰", "🤑", "🏆", "✅", "💪", "🌕",
)

BEARISH_EMOJIS: tuple[str, ...] = (
    "📉", "💀", "🔻", "🩸", "⚠️", "🚩", "☠️", "🗑️",
)


def _lowered(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(str(v).lower() for v in values if str(v).strip())


@dataclass(frozen=True)
class Lexicon:
    """
    Immutable scoring vocabulary.

    Keywords, phrases and negation words are stored lower-cased; token
    symbols are stored upper-cased and validated.
    """
    tracked_tokens: tuple[str, ...] = TRACKED_TOKENS
    token_categories: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(TOKEN_CATEGORIES)
    )
    bullish_keywords: tuple[str, ...] = BULLISH_KEYWORDS
    bearish_keywords: tuple[str, ...] = BEARISH_KEYWORDS
    high_conviction_bullish: tuple[str, ...] = HIGH_CONVICTION_BULLISH
    high_conviction_bearish: tuple[str, ...] = HIGH_CONVICTION_BEARISH
    negation_words: tuple[str, ...] = NEGATION_WORDS
    bullish_emojis: tuple[str, ...] = BULLISH_EMOJIS
    bearish_emojis: tuple[str, ...] = BEARISH_EMOJIS

    def __post_init__(self) -> None:
        try:
            tracked = tuple(dict.fromkeys(
                normalize_token(t) for t in self.tracked_tokens
            ))
            categories = {
                str(name).lower(): tuple(normalize_token(t) for t in tokens)
                for name, tokens in self.token_categories.items()
            }
        except InvalidTokenError as e:
            raise LexiconError(
                f"Invalid token symbol in lexicon: {e.token!r}",
                field_name="tracked_tokens",
            ) from e

        object.__setattr__(self, "tracked_tokens", tracked)
        object.__setattr__(self, "token_categories", categories)
        for name in (
            "bullish_keywords", "bearish_keywords",
            "high_conviction_bullish", "high_conviction_bearish",
            "negation_words",
        ):
            object.__setattr__(self, name, _lowered(getattr(self, name)))
        object.__setattr__(self, "bullish_emojis", tuple(self.bullish_emojis))
        object.__setattr__(self, "bearish_emojis", tuple(self.bearish_emojis))

    def is_tracked(self, symbol: str) -> bool:
        return symbol.upper() in self.tracked_tokens

    def category_of(self, symbol: str) -> Optional[str]:
        """Return the first category containing the symbol, if any."""
        symbol = symbol.upper()
        for name, tokens in self.token_categories.items():
            if symbol in tokens:
                return name
        return None

    def tokens_in_category(self, category: str) -> tuple[str, ...]:
        """
        Tokens belonging to a category.

        Raises:
            LexiconError: unknown category
        """
        key = category.lower()
        if key not in self.token_categories:
            raise LexiconError(
                f"Category '{category}' not found",
                field_name="token_categories",
                details={"available_categories": sorted(self.token_categories)},
            )
        return self.token_categories[key]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lexicon":
        """Build a lexicon, falling back to defaults for missing fields."""
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown lexicon fields: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        for name in known & set(data):
            value = data[name]
            if name == "token_categories":
                if not isinstance(value, dict):
                    raise LexiconError(
                        "token_categories must be a mapping",
                        field_name=name,
                    )
                kwargs[name] = {k: tuple(v or ()) for k, v in value.items()}
            else:
                if isinstance(value, str) or not isinstance(value, (list, tuple)):
                    raise LexiconError(
                        f"{name} must be a list",
                        field_name=name,
                    )
                kwargs[name] = tuple(value)
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Lexicon":
        """
        Load a lexicon from a YAML file.

        Raises:
            LexiconError: file missing, unreadable or malformed
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LexiconError(
                f"Failed to load lexicon from {path}: {e}",
                path=str(path),
            ) from e

        if not isinstance(data, dict):
            raise LexiconError(
                "Lexicon file must contain a mapping",
                path=str(path),
            )

        try:
            lexicon = cls.from_dict(data)
        except LexiconError as e:
            e.path = str(path)
            raise

        logger.info(
            f"Loaded lexicon from {path} "
            f"({len(lexicon.tracked_tokens)} tracked tokens)"
        )
        return lexicon

    def to_dict(self) -> dict[str, Any]:
        return {
            "tracked_tokens": list(self.tracked_tokens),
            "token_categories": {
                k: list(v) for k, v in self.token_categories.items()
            },
            "bullish_keywords": list(self.bullish_keywords),
            "bearish_keywords": list(self.bearish_keywords),
            "high_conviction_bullish": list(self.high_conviction_bullish),
            "high_conviction_bearish": list(self.high_conviction_bearish),
            "negation_words": list(self.negation_words),
            "bullish_emojis": list(self.bullish_emojis),
            "bearish_emojis": list(self.bearish_emojis),
        }
