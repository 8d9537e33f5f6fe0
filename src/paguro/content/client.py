"""Content Query Client: live vs. preview execution of repository queries.

Live queries (``preview=False``) are served from a TTL cache refreshed at
most once per freshness window. Preview queries always hit the
repository and never read or write the cache.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from paguro.content.cache import TTLCache
from paguro.content.models import ContentQuery
from paguro.integrations.sanity import ContentRepository

logger = logging.getLogger(__name__)


@dataclass
class QueryStats:
    """Repository access counters, mostly for diagnostics and tests."""

    hits: int = 0
    misses: int = 0
    preview_reads: int = 0

    @property
    def repository_calls(self) -> int:
        return self.misses + self.preview_reads


class ContentQueryClient:
    """Executes ``ContentQuery`` objects against a content repository."""

    def __init__(
        self,
        repository: ContentRepository,
        cache: TTLCache | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.repository = repository
        self.cache = cache if cache is not None else TTLCache(clock=clock)
        self._stats = QueryStats()
        self._stats_lock = threading.Lock()

    def _count(self, field: str) -> None:
        with self._stats_lock:
            setattr(self._stats, field, getattr(self._stats, field) + 1)

    def fetch(self, query: ContentQuery) -> Any:
        """Return the raw records for ``query``.

        Repository errors propagate unchanged.
        """
        params = query.repository_params()

        if query.preview:
            self._count("preview_reads")
            logger.debug("Preview fetch (%s), cache bypassed", query.policy.name)
            return self.repository.query(query.query, params, preview=True)

        if not query.policy.cacheable:
            self._count("misses")
            return self.repository.query(query.query, params, preview=False)

        key = query.cache_key()
        hit, value = self.cache.get(key)
        if hit:
            self._count("hits")
            logger.debug("Cache hit (%s, %s)", query.policy.name, query.locale.value)
            return value

        self._count("misses")
        logger.debug("Cache miss (%s, %s)", query.policy.name, query.locale.value)
        value = self.repository.query(query.query, params, preview=False)
        self.cache.set(key, value, query.policy.revalidate_seconds)
        return value

    def stats(self) -> QueryStats:
        with self._stats_lock:
            return QueryStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                preview_reads=self._stats.preview_reads,
            )
