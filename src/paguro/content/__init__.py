"""Content domain: repository queries, freshness policies and models.

The ContentQueryClient is the single gateway to the content repository:
it decides between cached live reads and uncached preview reads. The
typed fetchers in ``paguro.content.queries`` build on it.
"""

from paguro.content.cache import TTLCache
from paguro.content.client import ContentQueryClient, QueryStats
from paguro.content.models import (
    PLACEHOLDER_IMAGE,
    ContentQuery,
    ContentStatus,
    ContentType,
    MediaSubject,
    ResolvedImage,
    SearchItem,
    SearchResult,
)
from paguro.content.policies import FreshnessPolicy

__all__ = [
    "PLACEHOLDER_IMAGE",
    "ContentQuery",
    "ContentQueryClient",
    "ContentStatus",
    "ContentType",
    "FreshnessPolicy",
    "MediaSubject",
    "QueryStats",
    "ResolvedImage",
    "SearchItem",
    "SearchResult",
    "TTLCache",
]
