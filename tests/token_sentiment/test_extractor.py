"""
Tests for Token Extractor.

============================================================
TEST SCENARIOS
============================================================
1. Cashtags yield any symbol, tracked or not
2. Bare mentions only for tracked symbols, whole words only
3. Results are deduplicated and idempotent

============================================================
"""

import pytest

from token_sentiment import Lexicon, TokenExtractor


@pytest.fixture
def extractor(lexicon):
    return TokenExtractor(lexicon)


# ============================================================
# TEST: CASHTAGS
# ============================================================

class TestCashtags:
    """Tests for $SYMBOL matching."""

    def test_tracked_cashtag(self, extractor):
        """A cashtag of a tracked token is extracted."""
        assert extractor.extract("$SOL to the moon") == {"SOL"}

    def test_untracked_cashtag_is_discovered(self, extractor):
        """Cashtags are not limited to the tracked list."""
        assert extractor.extract("$PEPE is ripping") == {"PEPE"}

    def test_lowercase_cashtag_is_upper_cased(self, extractor):
        assert extractor.extract("$bonk szn") == {"BONK"}

    def test_single_letter_cashtag_ignored(self, extractor):
        """Cashtags need at least two letters."""
        assert extractor.extract("$X marks the spot") == set()

    def test_extract_tracked_drops_untracked(self, extractor):
        tokens = extractor.extract_tracked("$PEPE and $SOL")
        assert tokens == {"SOL"}


# ============================================================
# TEST: BARE MENTIONS
# ============================================================

class TestBareMentions:
    """Tests for whole-word mentions of tracked symbols."""

    def test_bare_mention_case_insensitive(self, extractor):
        assert extractor.extract("sol looks strong today") == {"SOL"}

    def test_substring_is_not_a_mention(self, extractor):
        """ETH inside ETHEREUM is not a mention."""
        assert extractor.extract("ethereum gas fees") == set()

    def test_whole_word_rule_with_short_symbol(self):
        """GOLDMAN never yields GO."""
        extractor = TokenExtractor(Lexicon(tracked_tokens=("GO",)))

        assert extractor.extract("GOLDMAN sachs upgrade") == set()
        assert extractor.extract("go team go") == {"GO"}

    def test_untracked_bare_word_ignored(self, extractor):
        assert extractor.extract("pepe is funny") == set()


# ============================================================
# TEST: SET SEMANTICS
# ============================================================

class TestSetSemantics:
    """Tests for deduplication and idempotence."""

    def test_cashtag_and_bare_mention_deduplicated(self, extractor):
        assert extractor.extract("$SOL SOL sol $sol") == {"SOL"}

    def test_multiple_tokens(self, extractor):
        assert extractor.extract("rotating from $BONK into JUP and wif") == {
            "BONK", "JUP", "WIF",
        }

    def test_idempotent(self, extractor):
        text = "$SOL breakout, BONK and $PEPE following"
        assert extractor.extract(text) == extractor.extract(text)

    def test_empty_text(self, extractor):
        assert extractor.extract("") == set()
