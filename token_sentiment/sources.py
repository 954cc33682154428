"""
Item Sources - Interface for the collaborators that fetch text items.

Fetching (scraping, APIs, browsers) lives outside the engine. A source
only has to hand back a batch of TextItem. Sources should not raise;
the engine still guards against it and treats a failure as an empty
batch.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from .models import TextItem


logger = logging.getLogger(__name__)


class BaseItemSource(ABC):
    """Abstract base class for item sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name used in logs and stats."""
        pass

    @abstractmethod
    async def fetch_items(self) -> list[TextItem]:
        """Fetch one batch of already-acquired items."""
        pass

    async def close(self) -> None:
        """Cleanup resources. Override if needed."""
        pass


class StaticItemSource(BaseItemSource):
    """Serves a fixed list of items, once per fetch."""

    def __init__(self, items: Iterable[TextItem], name: str = "static") -> None:
        self._items = list(items)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def fetch_items(self) -> list[TextItem]:
        logger.debug(f"[{self._name}] Serving {len(self._items)} items")
        return list(self._items)
