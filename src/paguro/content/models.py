"""Content domain models: pure Pydantic v2 data types.

Repository payloads use camelCase keys and Sanity system fields
(``_id``, ``_type``); models accept those aliases and expose snake_case
attributes. Missing optional fields resolve to ``None`` or empty
collections, never to errors.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from paguro.content.policies import NO_STORE, FreshnessPolicy
from paguro.i18n.locale import DEFAULT_LOCALE, Locale

PLACEHOLDER_IMAGE = "/world-placeholder.png"

Orientation = Literal["portrait", "landscape", "square", "panorama"]


class ContentStatus(StrEnum):
    """Editorial status of a repository document."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ContentType(StrEnum):
    """Searchable document types."""

    POST = "post"
    DESTINATION = "destination"


class RepositoryModel(BaseModel):
    """Base for models validated from repository payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """GROQ projects missing fields as null; let field defaults apply."""
        if not isinstance(data, dict):
            return data
        return {k: v for k, v in data.items() if v is not None}


# ── Queries ──────────────────────────────────────────────────────────────


class ContentQuery(BaseModel):
    """A request for the content repository.

    ``preview=True`` bypasses the cache and lets unpublished documents
    through; live queries only see published documents (or documents
    without a status field).
    """

    model_config = ConfigDict(frozen=True)

    query: str
    params: dict[str, Any] = Field(default_factory=dict)
    locale: Locale = DEFAULT_LOCALE
    start: int | None = Field(default=None, ge=0)
    end: int | None = Field(default=None, ge=0)
    preview: bool = False
    policy: FreshnessPolicy = NO_STORE

    def repository_params(self) -> dict[str, Any]:
        """Parameters sent along with the query text."""
        params: dict[str, Any] = dict(self.params)
        params["lang"] = self.locale.value
        params["preview"] = self.preview
        if self.start is not None:
            params["start"] = self.start
        if self.end is not None:
            params["end"] = self.end
        return params

    def identity(self) -> str:
        """Stable identity of the query text plus its parameters."""
        params = {k: v for k, v in self.repository_params().items() if k not in ("lang", "preview")}
        return self.query.strip() + "|" + json.dumps(params, sort_keys=True, default=str)

    def cache_key(self) -> tuple[str, str, bool]:
        return (self.identity(), self.locale.value, self.preview)


# ── Search ───────────────────────────────────────────────────────────────


class SearchItem(RepositoryModel):
    """One search hit with fields resolved for the requested locale."""

    id: str = Field(alias="_id")
    type: str = Field(alias="_type")
    title: str | None = None
    excerpt: str | None = None
    title_it: str | None = None
    title_en: str | None = None
    excerpt_it: str | None = None
    excerpt_en: str | None = None
    slug: str | None = None
    cover_image_url: str | None = None
    published_at: datetime | None = None
    score: float | None = Field(default=None, alias="_score")


class SearchResult(BaseModel):
    """A page of search results.

    ``pages == ceil(total / limit)`` and ``len(items) <= limit``.
    ``failed`` is set by page-level callers when the repository could not
    be reached; the error detail itself is only logged.
    """

    items: list[SearchItem] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    pages: int = 0
    failed: bool = False

    @classmethod
    def empty(cls, page: int = 1, *, failed: bool = False) -> SearchResult:
        return cls(items=[], total=0, page=page, pages=0, failed=failed)


# ── Media ────────────────────────────────────────────────────────────────


class ResolvedImage(BaseModel):
    """A display-ready image reference."""

    model_config = ConfigDict(frozen=True)

    src: str
    alt: str | None = None
    orientation: Orientation | None = None


class MediaSubject(BaseModel):
    """Anything that can be illustrated: a post or a destination."""

    cover_image: str | None = None
    gallery: list[str | None] = Field(default_factory=list)
    country_slug: str | None = None


# ── Repository documents ─────────────────────────────────────────────────


class BlogPostForIndex(RepositoryModel):
    """Blog index card."""

    id: str = Field(alias="_id")
    title: str | None = None
    excerpt: str | None = None
    title_it: str | None = None
    title_en: str | None = None
    excerpt_it: str | None = None
    excerpt_en: str | None = None
    slug: str
    published_at: datetime | None = None
    sort_date: datetime | None = None
    cover_image: dict[str, Any] | None = None


class MediaItem(RepositoryModel):
    """A media document dereferenced inside post content."""

    id: str | None = Field(default=None, alias="_id")
    type: str = Field(default="mediaItem", alias="_type")
    kind: str | None = Field(default=None, alias="type")
    title: str | None = None
    alt: str | None = None
    alt_i18n: dict[str, str | None] | None = Field(default=None, alias="altI18n")
    caption: str | None = None
    caption_i18n: dict[str, str | None] | None = Field(default=None, alias="captionI18n")
    caption_resolved: str | None = None
    alt_a11y_resolved: str | None = Field(default=None, alias="altA11yResolved")
    credit: str | None = None
    image: dict[str, Any] | None = None
    video_url: str | None = None


class PostBySlug(RepositoryModel):
    """A single post with its body."""

    id: str = Field(alias="_id")
    title: str | None = None
    excerpt: str | None = None
    title_i18n: dict[str, str | None] | None = Field(default=None, alias="titleI18n")
    excerpt_i18n: dict[str, str | None] | None = Field(default=None, alias="excerptI18n")
    slug: str
    status: ContentStatus | None = None
    published_at: datetime | None = None
    cover_image: dict[str, Any] | None = None
    content: list[dict[str, Any]] = Field(default_factory=list)

    def media_items(self) -> list[MediaItem]:
        """Dereferenced media documents embedded in the body."""
        return [
            MediaItem.model_validate(block)
            for block in self.content
            if block.get("_type") == "mediaItem"
        ]


class TaxonomyRef(RepositoryModel):
    """Country, region or travel style reference with a resolved title."""

    title: str | None = None
    title_i18n: dict[str, str | None] | None = Field(default=None, alias="titleI18n")
    slug: str | None = None
    order: int | None = None


class GalleryItem(RepositoryModel):
    """A gallery image document."""

    id: str = Field(alias="_id")
    created_at: datetime | None = Field(default=None, alias="_createdAt")
    title: str | None = None
    alt: str | None = None
    alt_i18n: dict[str, str | None] | None = Field(default=None, alias="altI18n")
    caption: str | None = None
    caption_i18n: dict[str, str | None] | None = Field(default=None, alias="captionI18n")
    caption_resolved: str | None = None
    alt_a11y_resolved: str | None = Field(default=None, alias="altA11yResolved")
    orientation: Orientation | None = None
    image: dict[str, Any] | None = None
    countries: list[TaxonomyRef] = Field(default_factory=list)
    regions: list[TaxonomyRef] = Field(default_factory=list)
    travel_styles: list[TaxonomyRef] = Field(default_factory=list)


class TravelStyleRef(RepositoryModel):
    slug: str | None = None
    label: str | None = None
    title_i18n: dict[str, str | None] | None = Field(default=None, alias="titleI18n")
    order: int | None = None


class CountryForDestinations(RepositoryModel):
    """Destination card derived from a country with related posts."""

    id: str = Field(alias="_id")
    name: str | None = None
    name_i18n: dict[str, str | None] | None = Field(default=None, alias="nameI18n")
    title: str | None = None
    title_i18n: dict[str, str | None] | None = Field(default=None, alias="titleI18n")
    slug: str | None = None
    world_region: TaxonomyRef | None = None
    post_count: int = 0
    cover_image: dict[str, Any] | None = None
    travel_styles: list[TravelStyleRef] = Field(default_factory=list)


class CountryCard(RepositoryModel):
    """Country with at least one published post."""

    id: str = Field(alias="_id")
    title: str | None = None
    title_i18n: dict[str, str | None] | None = Field(default=None, alias="titleI18n")
    slug: str | None = None
    post_count: int = 0
    cover_image: dict[str, Any] | None = None


class WorldRegion(RepositoryModel):
    id: str = Field(alias="_id")
    slug: str | None = None
    title: str | None = None
    short_title: str | None = None
    title_i18n: dict[str, str | None] | None = Field(default=None, alias="titleI18n")
    short_title_i18n: dict[str, str | None] | None = Field(default=None, alias="shortTitleI18n")
    order: int | None = None
