"""Free-text search: match patterns, scored pagination and the search payload."""

from paguro.search.api import SearchPayload, build_search_payload
from paguro.search.engine import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    MIN_LIMIT,
    SearchEngine,
    SearchMode,
    SearchRequest,
    build_match_pattern,
    clamp_limit,
    clamp_page,
    result_window,
)

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "MIN_LIMIT",
    "SearchEngine",
    "SearchMode",
    "SearchPayload",
    "SearchRequest",
    "build_match_pattern",
    "build_search_payload",
    "clamp_limit",
    "clamp_page",
    "result_window",
]
