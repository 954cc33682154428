"""
Token Extractor - Finds the token symbols a text item refers to.

Two matching rules, unioned:
- Cashtags: `$` followed by 2-10 letters. Any symbol qualifies, tracked
  or not, so new symbols can be discovered.
- Bare mentions of tracked symbols as case-insensitive whole words.
  "GOLDMAN" never yields "GO".
"""

import re
from typing import Optional

from .lexicon import Lexicon


CASHTAG_PATTERN = re.compile(r"\$([A-Z]{2,10})")


class TokenExtractor:
    """Extracts deduplicated token symbols from item text."""

    def __init__(self, lexicon: Optional[Lexicon] = None) -> None:
        self.lexicon = lexicon or Lexicon()
        self._bare_patterns: tuple[tuple[str, re.Pattern], ...] = tuple(
            (symbol, re.compile(rf"\b{re.escape(symbol)}\b", re.IGNORECASE))
            for symbol in self.lexicon.tracked_tokens
        )

    def extract(self, text: str) -> set[str]:
        """Return every symbol referenced by the text."""
        if not text:
            return set()

        tokens = set(CASHTAG_PATTERN.findall(text.upper()))

        upper_text = text.upper()
        for symbol, pattern in self._bare_patterns:
            if symbol in tokens or symbol not in upper_text:
                continue
            if pattern.search(text):
                tokens.add(symbol)

        return tokens

    def extract_tracked(self, text: str) -> set[str]:
        """Only the referenced symbols that are on the tracked list."""
        return {t for t in self.extract(text) if self.lexicon.is_tracked(t)}
