"""
Shared fixtures for the token sentiment tests.
"""

import pytest

from token_sentiment import (
    EngineConfig,
    ItemScorer,
    Lexicon,
    ScoringWeights,
    SentimentEngine,
    TextItem,
    set_config,
)


@pytest.fixture(autouse=True)
def default_config():
    """Pin the global config to defaults so SENTIMENT_* env vars never leak in."""
    config = EngineConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def lexicon():
    return Lexicon()


@pytest.fixture
def scorer(lexicon):
    return ItemScorer(lexicon, ScoringWeights())


@pytest.fixture
def engine(default_config):
    return SentimentEngine(config=default_config)


@pytest.fixture
def make_item():
    """Factory for TextItem with zero engagement unless overridden."""
    def _make(item_id: str, text: str, **kwargs) -> TextItem:
        return TextItem(id=item_id, text=text, **kwargs)
    return _make
