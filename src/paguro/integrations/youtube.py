"""YouTube channel search: optional companion to site search.

Every failure here is soft: missing credentials or an API error yield
an empty result plus a short diagnostic, so a video outage never breaks
site search. Results are cached in-process for an hour.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
import urllib.error
import urllib.parse
import urllib.request
from collections import OrderedDict
from collections.abc import Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
CACHE_TTL_SECONDS = 60 * 60
CACHE_MAX_ENTRIES = 200
MAX_RESULTS = 24


class YouTubeConfig(BaseModel):
    """Credentials for the YouTube Data API."""

    api_key: str = ""
    channel_id: str = ""
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.channel_id)

    def missing(self) -> list[str]:
        names = []
        if not self.api_key:
            names.append("YOUTUBE_API_KEY")
        if not self.channel_id:
            names.append("YOUTUBE_CHANNEL_ID")
        return names

    @classmethod
    def from_env(cls) -> YouTubeConfig:
        return cls(
            api_key=os.environ.get("YOUTUBE_API_KEY", ""),
            channel_id=os.environ.get("YOUTUBE_CHANNEL_ID", ""),
        )


class VideoItem(BaseModel):
    id: str
    title: str
    url: str
    thumbnail_url: str | None = None
    published_at: str | None = None
    channel_title: str | None = None


class VideoSearchResult(BaseModel):
    items: list[VideoItem] = Field(default_factory=list)
    total: int = 0
    error: str | None = None


def _thumbnail(snippet: dict) -> str | None:
    thumbs = snippet.get("thumbnails") or {}
    for size in ("maxres", "standard", "high", "medium", "default"):
        url = (thumbs.get(size) or {}).get("url")
        if url:
            return url
    return None


def parse_search_response(data: dict) -> VideoSearchResult:
    """Map a ``search.list`` response to video items, skipping non-videos."""
    items: list[VideoItem] = []
    for raw in data.get("items") or []:
        video_id = (raw.get("id") or {}).get("videoId")
        if not video_id:
            continue
        snippet = raw.get("snippet") or {}
        items.append(
            VideoItem(
                id=video_id,
                title=snippet.get("title") or "Video",
                url=f"https://www.youtube.com/watch?v={video_id}",
                thumbnail_url=_thumbnail(snippet),
                published_at=snippet.get("publishedAt"),
                channel_title=snippet.get("channelTitle"),
            )
        )
    total = (data.get("pageInfo") or {}).get("totalResults")
    return VideoSearchResult(items=items, total=total if isinstance(total, int) else len(items))


class YouTubeSearchClient:
    """Searches a single channel's videos, most relevant first."""

    def __init__(self, config: YouTubeConfig, clock: Callable[[], float] | None = None) -> None:
        self.config = config
        self._clock = clock or time.monotonic
        self._cache: OrderedDict[str, tuple[float, VideoSearchResult]] = OrderedDict()
        self._cache_lock = threading.Lock()

    @staticmethod
    def _cache_key(q: str, limit: int) -> str:
        return f"{q.lower()}::{limit}"

    def _cache_get(self, key: str) -> VideoSearchResult | None:
        now = self._clock()
        with self._cache_lock:
            hit = self._cache.get(key)
            if hit is None:
                return None
            expires_at, value = hit
            if now > expires_at:
                self._cache.pop(key, None)
                return None
            return value

    def _cache_set(self, key: str, value: VideoSearchResult) -> None:
        expires_at = self._clock() + CACHE_TTL_SECONDS
        with self._cache_lock:
            self._cache[key] = (expires_at, value)
            while len(self._cache) > CACHE_MAX_ENTRIES:
                self._cache.popitem(last=False)

    def build_url(self, q: str, limit: int) -> str:
        query = urllib.parse.urlencode({
            "part": "snippet",
            "type": "video",
            "maxResults": str(limit),
            "q": q,
            "channelId": self.config.channel_id,
            "order": "relevance",
            "key": self.config.api_key,
        })
        return f"{SEARCH_URL}?{query}"

    def search(self, q: str, limit: int = 6) -> VideoSearchResult:
        """Search videos; never raises."""
        if not self.config.is_configured:
            missing = ", ".join(self.config.missing())
            return VideoSearchResult(error=f"Missing env var(s): {missing}")

        limit = min(MAX_RESULTS, max(1, limit))
        key = self._cache_key(q, limit)
        cached = self._cache_get(key)
        if cached is not None:
            return cached.model_copy()

        req = urllib.request.Request(self.build_url(q, limit), headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout_seconds) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            body = ""
            try:
                body = exc.read().decode("utf-8", errors="replace")[:400]
            except OSError:
                body = ""
            msg = f"YouTube API error {exc.code} {exc.reason}" + (f": {body}" if body else "")
            logger.warning("%s", msg)
            return VideoSearchResult(error=msg)
        except (urllib.error.URLError, TimeoutError, OSError, ValueError) as exc:
            msg = f"YouTube API request failed: {exc}"
            logger.warning("%s", msg)
            return VideoSearchResult(error=msg)

        result = parse_search_response(data if isinstance(data, dict) else {})
        self._cache_set(key, result)
        return result
