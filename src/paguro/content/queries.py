"""Typed content fetchers, one per page-level call site.

Each fetcher pairs a GROQ query with its freshness policy and validates
the raw records into models whose display fields are already resolved
for the requested locale (``$lang``), with the other locale as fallback.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from paguro.content import policies
from paguro.content.client import ContentQueryClient
from paguro.content.models import (
    BlogPostForIndex,
    ContentQuery,
    CountryCard,
    CountryForDestinations,
    GalleryItem,
    PostBySlug,
    WorldRegion,
)
from paguro.content.policies import FreshnessPolicy
from paguro.errors import MalformedResponseError
from paguro.i18n.locale import DEFAULT_LOCALE, Locale

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Live reads see published documents and documents without a status.
VISIBILITY_FILTER = '($preview == true || !defined(status) || status == "published")'

POST_VISIBILITY_FILTER = '(status == "published" || $preview == true)'


def _localized(field: str) -> str:
    """GROQ expression picking ``{field}En``/``{field}It`` with fallback."""
    return (
        f'select($lang == "en" => coalesce({field}En, {field}It), '
        f"coalesce({field}It, {field}En))"
    )


BLOG_INDEX_QUERY = f"""
*[
  _type == "post" &&
  defined(slug.current) &&
  !(_id in path("drafts.**")) &&
  {VISIBILITY_FILTER}
]
| order(coalesce(publishedAt, _updatedAt, _createdAt) desc) {{
  _id,
  titleIt,
  titleEn,
  excerptIt,
  excerptEn,
  "title": {_localized("title")},
  "excerpt": {_localized("excerpt")},
  "slug": slug.current,
  publishedAt,
  "sortDate": coalesce(publishedAt, _updatedAt, _createdAt),
  "coverImage": coalesce(coverImage->image, coverImage.image, coverImage)
}}
"""

POST_BY_SLUG_QUERY = f"""
*[
  _type == "post" &&
  {VISIBILITY_FILTER} &&
  slug.current == $slug
][0]{{
  _id,
  titleI18n,
  excerptI18n,
  "title": coalesce(titleI18n[$lang], title),
  "excerpt": coalesce(excerptI18n[$lang], excerpt),
  "slug": slug.current,
  status,
  publishedAt,
  "coverImage": coverImage->image,
  "content": content[]{{
    ...,
    _type == "reference" => @->{{
      _id,
      _type,
      type,
      title,
      alt,
      altI18n,
      caption,
      captionI18n,
      "captionResolved": coalesce(captionI18n[$lang], caption),
      "altA11yResolved": coalesce(altI18n[$lang], alt),
      credit,
      image,
      videoUrl
    }}
  }}
}}
"""

_TAXONOMY_PROJECTION = """{
    titleI18n,
    "title": coalesce(titleI18n[$lang], title),
    "slug": slug.current
  }"""

GALLERY_QUERY = f"""
*[
  _type == "mediaItem" &&
  type == "image" &&
  defined(image.asset) &&
  excludeFromGallery != true
]
| order(_createdAt desc) {{
  _id,
  _createdAt,
  title,
  alt,
  altI18n,
  caption,
  captionI18n,
  orientation,
  "captionResolved": coalesce(captionI18n[$lang], caption),
  "altA11yResolved": coalesce(altI18n[$lang], alt),
  "image": image,
  countries[]->{_TAXONOMY_PROJECTION},
  regions[]->{_TAXONOMY_PROJECTION},
  travelStyles[]->{_TAXONOMY_PROJECTION}
}}
"""

_RELATED_POSTS = f'*[_type == "post" && {POST_VISIBILITY_FILTER} && references(^._id)]'

COUNTRIES_FOR_DESTINATIONS_QUERY = f"""
*[_type == "country"] | order(coalesce(nameI18n[$lang], titleI18n[$lang], title) asc) {{
  _id,
  nameI18n,
  "name": coalesce(nameI18n[$lang], titleI18n[$lang], title),
  titleI18n,
  "title": coalesce(nameI18n[$lang], titleI18n[$lang], title),
  "slug": slug.current,
  worldRegion->{{
    titleI18n,
    "title": coalesce(titleI18n[$lang], title),
    "slug": slug.current,
    order
  }},
  "postCount": count({_RELATED_POSTS}),
  "travelStyles": array::unique({_RELATED_POSTS}.travelStyles[]->{{
    "slug": slug.current,
    titleI18n,
    "label": coalesce(titleI18n[$lang], title),
    order
  }}) | order(order asc, label asc),
  "coverImage": coalesce(
    destinationCover->image,
    {_RELATED_POSTS} | order(_updatedAt desc)[0].cardImage->image
  )
}}
"""

COUNTRIES_WITH_POSTS_QUERY = """
*[
  _type == "country" &&
  count(*[_type == "post" && status == "published" && references(^._id)]) > 0
] | order(coalesce(titleI18n[$lang], title) asc) {
  _id,
  titleI18n,
  "title": coalesce(titleI18n[$lang], title),
  "slug": slug.current,
  "postCount": count(*[_type == "post" && status == "published" && references(^._id)]),
  "coverImage": *[
    _type == "post" &&
    status == "published" &&
    references(^._id) &&
    defined(coverImage)
  ] | order(publishedAt desc, _createdAt desc)[0].coverImage->image
}
"""

WORLD_REGIONS_QUERY = """
*[_type == "worldRegion"]
| order(order asc, coalesce(titleI18n[$lang], title) asc) {
  _id,
  titleI18n,
  shortTitleI18n,
  "title": coalesce(titleI18n[$lang], title),
  "shortTitle": coalesce(shortTitleI18n[$lang], shortTitle),
  "slug": slug.current,
  order
}
"""


def _fetch(
    client: ContentQueryClient,
    groq: str,
    policy: FreshnessPolicy,
    locale: Locale,
    preview: bool,
    params: dict[str, Any] | None = None,
) -> Any:
    return client.fetch(
        ContentQuery(
            query=groq,
            params=params or {},
            locale=locale,
            preview=preview,
            policy=policy,
        )
    )


def _validate_list(model: type[M], raw: Any, label: str) -> list[M]:
    if raw is None:
        return []
    try:
        return TypeAdapter(list[model]).validate_python(raw)  # type: ignore[valid-type]
    except ValidationError as exc:
        raise MalformedResponseError(f"Unexpected {label} payload: {exc}") from exc


def get_blog_posts_for_index(
    client: ContentQueryClient,
    locale: Locale = DEFAULT_LOCALE,
    *,
    preview: bool = False,
) -> list[BlogPostForIndex]:
    """Blog index cards, newest first."""
    raw = _fetch(client, BLOG_INDEX_QUERY, policies.BLOG_INDEX, locale, preview)
    return _validate_list(BlogPostForIndex, raw, "blog index")


def get_post_by_slug(
    client: ContentQueryClient,
    slug: str,
    locale: Locale = DEFAULT_LOCALE,
    *,
    preview: bool = False,
) -> PostBySlug | None:
    """A single post, or None when no visible post has this slug."""
    raw = _fetch(client, POST_BY_SLUG_QUERY, policies.POST, locale, preview, {"slug": slug})
    if raw is None:
        logger.debug("No post for slug %r (preview=%s)", slug, preview)
        return None
    try:
        return PostBySlug.model_validate(raw)
    except ValidationError as exc:
        raise MalformedResponseError(f"Unexpected post payload: {exc}") from exc


def get_gallery_items(
    client: ContentQueryClient,
    locale: Locale = DEFAULT_LOCALE,
    *,
    preview: bool = False,
) -> list[GalleryItem]:
    raw = _fetch(client, GALLERY_QUERY, policies.GALLERY, locale, preview)
    return _validate_list(GalleryItem, raw, "gallery")


def get_countries_for_destinations(
    client: ContentQueryClient,
    locale: Locale = DEFAULT_LOCALE,
    *,
    preview: bool = False,
) -> list[CountryForDestinations]:
    """Destination cards derived from countries.

    ``post_count`` counts published posts, plus drafts in preview mode.
    """
    raw = _fetch(client, COUNTRIES_FOR_DESTINATIONS_QUERY, policies.DESTINATIONS, locale, preview)
    return _validate_list(CountryForDestinations, raw, "destinations")


def get_countries_with_posts(
    client: ContentQueryClient,
    locale: Locale = DEFAULT_LOCALE,
) -> list[CountryCard]:
    raw = _fetch(
        client, COUNTRIES_WITH_POSTS_QUERY, policies.COUNTRIES_WITH_POSTS, locale, False
    )
    return _validate_list(CountryCard, raw, "countries")


def get_world_regions(
    client: ContentQueryClient,
    locale: Locale = DEFAULT_LOCALE,
) -> list[WorldRegion]:
    raw = _fetch(client, WORLD_REGIONS_QUERY, policies.WORLD_REGIONS, locale, False)
    return _validate_list(WorldRegion, raw, "world regions")
