"""
Token Sentiment - History Store.

============================================================
RETENTION
============================================================

Per-token append-only log of TokenSignal, oldest first, capped at
`limit` entries (default 500). Once the cap is exceeded the oldest
entries are dropped: FIFO by append order, reads never affect
retention. The last entry is the token's current signal.

============================================================
THREAD SAFETY
============================================================

Each token key has its own RLock. Writers for one token are
serialized, writers for different tokens are not. `token_lock()`
lets a caller hold a token's lock across read-previous, aggregate
and append so momentum always refers to the true predecessor.
Readers take a snapshot under the lock; stored signals are immutable.

============================================================
"""

import logging
import threading
from collections import deque
from contextlib import contextmanager
from typing import Deque, Dict, Iterator, List, Optional, Tuple

from .models import TokenSignal


logger = logging.getLogger(__name__)


DEFAULT_HISTORY_LIMIT = 500


class HistoryStore:
    """
    Bounded per-token history of TokenSignal.

    Usage:
        store = HistoryStore(limit=500)
        store.append(signal)
        store.current("SOL")
        store.history("SOL")
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._series: Dict[str, Deque[TokenSignal]] = {}
        self._token_locks: Dict[str, threading.RLock] = {}
        self._lock = threading.RLock()
        self._total_appends = 0
        self._total_evictions = 0

    # =========================================================
    # LOCKING
    # =========================================================

    def _lock_for(self, token: str) -> threading.RLock:
        with self._lock:
            lock = self._token_locks.get(token)
            if lock is None:
                lock = threading.RLock()
                self._token_locks[token] = lock
            return lock

    @contextmanager
    def token_lock(self, token: str) -> Iterator[None]:
        """Hold the single-writer lock for one token."""
        with self._lock_for(token.upper()):
            yield

    # =========================================================
    # WRITES
    # =========================================================

    def append(self, signal: TokenSignal) -> None:
        """Append to the token's tail, evicting the oldest past the cap."""
        token = signal.token
        with self._lock_for(token):
            with self._lock:
                series = self._series.get(token)
                if series is None:
                    series = deque(maxlen=self.limit)
                    self._series[token] = series
                if len(series) == self.limit:
                    self._total_evictions += 1
                series.append(signal)
                self._total_appends += 1

    def clear(self) -> None:
        """Drop all history. Token locks are kept so held locks stay valid."""
        with self._lock:
            self._series.clear()
            self._total_appends = 0
            self._total_evictions = 0
        logger.info("History store cleared")

    # =========================================================
    # READS
    # =========================================================

    def history(self, token: str) -> List[TokenSignal]:
        """Full retained history, oldest first. Empty if never seen."""
        with self._lock:
            series = self._series.get(token.upper())
            return list(series) if series else []

    def current(self, token: str) -> Optional[TokenSignal]:
        """Most recent signal, or None if the token was never seen."""
        with self._lock:
            series = self._series.get(token.upper())
            return series[-1] if series else None

    def latest_pair(
        self,
        token: str,
    ) -> Optional[Tuple[TokenSignal, TokenSignal]]:
        """
        (previous, latest) for a token.

        previous is latest itself when only one entry exists.
        """
        with self._lock:
            series = self._series.get(token.upper())
            if not series:
                return None
            latest = series[-1]
            previous = series[-2] if len(series) > 1 else latest
            return previous, latest

    def tokens(self) -> List[str]:
        """Tokens with at least one stored signal."""
        with self._lock:
            return [t for t, s in self._series.items() if s]

    def snapshot(self) -> Dict[str, TokenSignal]:
        """Current signal for every known token."""
        with self._lock:
            return {t: s[-1] for t, s in self._series.items() if s}

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for s in self._series.values() if s)

    def __contains__(self, token: object) -> bool:
        if not isinstance(token, str):
            return False
        with self._lock:
            return bool(self._series.get(token.upper()))

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "tokens": sum(1 for s in self._series.values() if s),
                "signals_stored": sum(len(s) for s in self._series.values()),
                "total_appends": self._total_appends,
                "total_evictions": self._total_evictions,
                "limit": self.limit,
            }
