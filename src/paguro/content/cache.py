"""In-process time-to-live cache for live query results.

Entries are keyed by ``(query identity, locale, preview)`` and expire
after the freshness policy's ``revalidate_seconds``. There is no
explicit invalidation: a content change shows up at most one policy
window later.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any
    stored_at: float
    ttl: float


class TTLCache:
    """Mapping of cache keys to values with a per-entry time-to-live.

    ``clock`` defaults to ``time.monotonic`` and can be swapped in tests.
    """

    def __init__(self, clock: Callable[[], float] | None = None, max_entries: int = 512) -> None:
        self._clock = clock or time.monotonic
        self._max_entries = max_entries
        self._entries: dict[Hashable, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> tuple[bool, Any]:
        """Return ``(hit, value)``; expired entries are dropped and count as misses."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            if now - entry.stored_at >= entry.ttl:
                del self._entries[key]
                return False, None
            return True, entry.value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = _Entry(value=value, stored_at=self._clock(), ttl=ttl)
            while len(self._entries) > self._max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug("Evicted cache entry %r", oldest)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        hit, _ = self.get(key)
        return hit

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
