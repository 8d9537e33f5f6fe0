"""Combined search payload served to the search modal and /search page.

Site results come from the SearchEngine and are authoritative: a
repository failure propagates so the HTTP layer can answer with a bare
"Search failed". Video results are best effort.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

from paguro.content.models import SearchItem
from paguro.i18n.locale import Locale, normalize_locale
from paguro.integrations.youtube import VideoItem, YouTubeSearchClient
from paguro.search.engine import SearchEngine, clamp_page

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3

SITE_LIMIT = 8
VIDEO_LIMIT = 6
FULL_SCOPE_LIMIT = 24

NO_STORE = "no-store"
SHORT_PUBLIC_CACHE = "public, s-maxage=60, stale-while-revalidate=60"

Scope = Literal["preview", "all"]


class SiteSection(BaseModel):
    items: list[SearchItem] = Field(default_factory=list)
    total: int = 0


class VideoSection(BaseModel):
    items: list[VideoItem] = Field(default_factory=list)
    total: int = 0


class SearchPayload(BaseModel):
    """Response body plus the Cache-Control header to send with it."""

    q: str
    lang: Locale
    sanity: SiteSection = Field(default_factory=SiteSection)
    youtube: VideoSection = Field(default_factory=VideoSection)
    youtube_error: str | None = None
    cache_control: str = Field(default=NO_STORE, exclude=True)


def build_search_payload(
    engine: SearchEngine,
    youtube: YouTubeSearchClient | None,
    q: str | None,
    *,
    page: object = 1,
    lang: object = None,
    sanity_scope: Scope = "preview",
    youtube_scope: Scope = "preview",
    min_query_length: int = MIN_QUERY_LENGTH,
) -> SearchPayload:
    """Run site search and, when configured, channel video search.

    Queries shorter than ``min_query_length`` (and blank ones) return an
    empty, uncacheable payload without calling anything.
    """
    query = (q or "").strip()
    locale = normalize_locale(lang)

    if len(query) < min_query_length:
        return SearchPayload(q=query, lang=locale)

    try:
        page_number = clamp_page(page)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        page_number = 1

    site_limit = FULL_SCOPE_LIMIT if sanity_scope == "all" else SITE_LIMIT
    video_limit = FULL_SCOPE_LIMIT if youtube_scope == "all" else VIDEO_LIMIT

    site = engine.search(query, page_number, site_limit, locale=locale)

    payload = SearchPayload(
        q=query,
        lang=locale,
        sanity=SiteSection(items=site.items, total=site.total),
        cache_control=SHORT_PUBLIC_CACHE,
    )
    if youtube is not None:
        videos = youtube.search(query, video_limit)
        payload.youtube = VideoSection(items=videos.items, total=videos.total)
        payload.youtube_error = videos.error
    return payload
