"""Free-text search over posts and destinations.

Ranking (relevance boosts, then recency) is executed by the content
repository itself; there is no separate search index.

Pipeline: trim the query, turn it into a ``*tok1*tok2*`` match pattern,
clamp paging, then run a counting query and a windowed scored query
concurrently. Either query failing fails the whole search.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from paguro.content import policies
from paguro.content.client import ContentQueryClient
from paguro.content.models import ContentQuery, ContentType, SearchItem, SearchResult
from paguro.errors import ContentRepositoryError, MalformedResponseError
from paguro.i18n.locale import DEFAULT_LOCALE, Locale

logger = logging.getLogger(__name__)

MIN_LIMIT = 6
MAX_LIMIT = 24
DEFAULT_LIMIT = 12
DEFAULT_TYPES: tuple[str, ...] = (ContentType.POST.value, ContentType.DESTINATION.value)


class SearchMode(StrEnum):
    """How much of each document is searched."""

    QUICK = "quick"  # titles, excerpts, taxonomy and media text
    FULL = "full"  # also the portable-text body


# ── Pure helpers ─────────────────────────────────────────────────────────


def build_match_pattern(q: str) -> str:
    """Turn free text into a contains-all-tokens-in-order pattern.

    ``"foo  bar"`` becomes ``"*foo*bar*"``; blank input gives ``""``.
    """
    tokens = q.split()
    if not tokens:
        return ""
    return "*" + "*".join(tokens) + "*"


def clamp_limit(limit: int | float | None) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    if isinstance(limit, float) and not math.isfinite(limit):
        if math.isnan(limit):
            return DEFAULT_LIMIT
        return MAX_LIMIT if limit > 0 else MIN_LIMIT
    return min(MAX_LIMIT, max(MIN_LIMIT, int(limit)))


def clamp_page(page: int | float | None) -> int:
    if page is None or (isinstance(page, float) and not math.isfinite(page)):
        return 1
    return max(1, int(page))


def result_window(page: int, limit: int) -> tuple[int, int]:
    """Half-open ``[start, end)`` slice for a 1-based page."""
    start = (page - 1) * limit
    return start, start + limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total > 0 else 0


class SearchRequest(BaseModel):
    """User-supplied search parameters, clamped rather than rejected."""

    q: str = ""
    page: int = 1
    limit: int = DEFAULT_LIMIT
    locale: Locale = DEFAULT_LOCALE
    preview: bool = False
    types: tuple[str, ...] = Field(default=DEFAULT_TYPES)
    mode: SearchMode = SearchMode.QUICK

    @field_validator("q", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, value: Any) -> int:
        try:
            return clamp_page(value)
        except (TypeError, ValueError, OverflowError):
            return 1

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value: Any) -> int:
        try:
            return clamp_limit(value)
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_LIMIT


# ── GROQ ─────────────────────────────────────────────────────────────────

_MATCH_FIELDS = """
  title match $pattern ||
  titleIt match $pattern ||
  titleEn match $pattern ||
  excerpt match $pattern ||
  excerptIt match $pattern ||
  excerptEn match $pattern ||
  country->title match $pattern ||
  country->nameI18n.en match $pattern ||
  country->nameI18n.it match $pattern ||
  countries[]->title match $pattern ||
  countries[]->nameI18n.en match $pattern ||
  countries[]->nameI18n.it match $pattern ||
  coverImage->title match $pattern ||
  coverImage->alt match $pattern ||
  coverImage->altI18n.en match $pattern ||
  coverImage->altI18n.it match $pattern ||
  coverImage->captionI18n.en match $pattern ||
  coverImage->captionI18n.it match $pattern ||
  coverImage->countries[]->title match $pattern ||
  coverImage->countries[]->nameI18n.en match $pattern ||
  coverImage->countries[]->nameI18n.it match $pattern ||
  coverImage.caption match $pattern ||
  (
    $mode == "full" &&
    (
      pt::text(select($lang == "en" => coalesce(contentEn, contentIt), coalesce(contentIt, contentEn))) match $pattern ||
      pt::text(content) match $pattern
    )
  )
"""

_FILTER = f"""
  _type in $types &&
  ({_MATCH_FIELDS}) &&
  ($preview == true || !defined(status) || status == "published")
"""

SEARCH_COUNT_QUERY = f"count(*[{_FILTER}])"

SEARCH_ITEMS_QUERY = f"""
*[{_FILTER}]
| score(
    boost(title match $pattern, 3),
    boost(titleIt match $pattern, 3),
    boost(titleEn match $pattern, 3),
    boost(excerptIt match $pattern, 2),
    boost(excerptEn match $pattern, 2),
    excerpt match $pattern,
    countries[]->title match $pattern,
    country->title match $pattern
  )
| order(_score desc, coalesce(publishedAt, _createdAt) desc)
[$start...$end]{{
  _id,
  _type,
  _score,
  titleIt,
  titleEn,
  excerptIt,
  excerptEn,
  "title": coalesce(
    select($lang == "en" => coalesce(titleEn, titleIt, title), coalesce(titleIt, titleEn, title)),
    title
  ),
  "excerpt": coalesce(
    select($lang == "en" => coalesce(excerptEn, excerptIt, excerpt), coalesce(excerptIt, excerptEn, excerpt)),
    excerpt
  ),
  "slug": slug.current,
  publishedAt,
  "coverImageUrl": coalesce(
    coverImage->image.asset->url,
    coverImage.image.asset->url,
    coverImage.asset->url
  )
}}
"""

_ITEMS_ADAPTER = TypeAdapter(list[SearchItem])


class SearchEngine:
    """Executes scored, paginated searches through a ContentQueryClient."""

    def __init__(self, client: ContentQueryClient) -> None:
        self.client = client

    def search(
        self,
        q: str,
        page: int | None = 1,
        limit: int | None = DEFAULT_LIMIT,
        *,
        locale: Locale = DEFAULT_LOCALE,
        preview: bool = False,
        types: tuple[str, ...] = DEFAULT_TYPES,
        mode: SearchMode = SearchMode.QUICK,
    ) -> SearchResult:
        """Return one page of results for ``q``.

        An empty or blank query returns an empty result without touching
        the repository. Repository failures propagate.
        """
        request = SearchRequest(
            q=q, page=page, limit=limit, locale=locale, preview=preview, types=types, mode=mode
        )
        return self.run(request)

    def run(self, request: SearchRequest) -> SearchResult:
        pattern = build_match_pattern(request.q)
        if not pattern:
            return SearchResult.empty(request.page)

        start, end = result_window(request.page, request.limit)
        params: dict[str, Any] = {
            "pattern": pattern,
            "types": list(request.types),
            "mode": request.mode.value,
        }
        count_query = ContentQuery(
            query=SEARCH_COUNT_QUERY,
            params=params,
            locale=request.locale,
            preview=request.preview,
            policy=policies.NO_STORE,
        )
        items_query = ContentQuery(
            query=SEARCH_ITEMS_QUERY,
            params=params,
            locale=request.locale,
            start=start,
            end=end,
            preview=request.preview,
            policy=policies.NO_STORE,
        )

        logger.debug(
            "Searching %r page=%d limit=%d lang=%s preview=%s",
            pattern, request.page, request.limit, request.locale.value, request.preview,
        )
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="paguro-search") as pool:
            count_future = pool.submit(self.client.fetch, count_query)
            items_future = pool.submit(self.client.fetch, items_query)
            raw_total = count_future.result()
            raw_items = items_future.result()

        total = self._parse_total(raw_total)
        items = self._parse_items(raw_items)[: request.limit]
        return SearchResult(
            items=items,
            total=total,
            page=request.page,
            pages=page_count(total, request.limit),
        )

    def search_safely(
        self,
        q: str,
        page: int | None = 1,
        limit: int | None = DEFAULT_LIMIT,
        **kwargs: Any,
    ) -> SearchResult:
        """Like ``search`` but turns repository failures into an empty page.

        For rendered pages: the failure is logged, never shown.
        """
        try:
            return self.search(q, page, limit, **kwargs)
        except ContentRepositoryError:
            logger.warning("Search for %r failed; showing empty results", q, exc_info=True)
            return SearchResult.empty(SearchRequest(page=page).page, failed=True)

    @staticmethod
    def _parse_total(raw: Any) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            raise MalformedResponseError(f"Search count is not a non-negative integer: {raw!r}")
        return raw

    @staticmethod
    def _parse_items(raw: Any) -> list[SearchItem]:
        if raw is None:
            return []
        try:
            return _ITEMS_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            raise MalformedResponseError(f"Unexpected search items payload: {exc}") from exc
