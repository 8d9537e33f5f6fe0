"""Media path normalization and cover/gallery fallback chains.

Resolution never comes back empty: a cover falls back from the explicit
image to the country default and finally to a fixed placeholder.
Turning a resolved path into a delivery URL (resizing, formats) belongs
to the image service, passed in as ``image_url``.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from paguro.content.models import PLACEHOLDER_IMAGE, MediaSubject, ResolvedImage
from paguro.media.catalog import GALLERY_COUNTRIES, country_media

ImageUrlBuilder = Callable[[str], str]

_LEGACY_DESTINATION_RE = re.compile(r"^/destinations/(?!images/)([^/]+)/([^/]+)$")

DEFAULT_GALLERY_LIMIT = 6


def _identity(path: str) -> str:
    return path


def normalize_legacy_path(src: str) -> str:
    """Rewrite ``/destinations/{country}/{file}`` to ``/destinations/images/{country}/{file}``.

    Canonical and unrecognized paths pass through unchanged.
    """
    return _LEGACY_DESTINATION_RE.sub(r"/destinations/images/\1/\2", src or "")


def default_cover_for_country(country_slug: str | None) -> ResolvedImage | None:
    country = country_media(country_slug)
    if country is None or not country.images:
        return None
    first = country.images[0]
    return ResolvedImage(
        src=normalize_legacy_path(country.path_for(first)),
        alt=first.alt,
        orientation=first.orientation,
    )


def default_gallery_for_country(
    country_slug: str | None, limit: int = DEFAULT_GALLERY_LIMIT
) -> list[ResolvedImage]:
    country = country_media(country_slug)
    if country is None:
        return []
    return [
        ResolvedImage(
            src=normalize_legacy_path(country.path_for(img)),
            alt=img.alt,
            orientation=img.orientation,
        )
        for img in country.images[: max(0, limit)]
    ]


def resolve_cover(subject: MediaSubject, image_url: ImageUrlBuilder | None = None) -> ResolvedImage:
    """Explicit cover, else the country default, else the placeholder."""
    build = image_url or _identity
    if subject.cover_image and subject.cover_image.strip():
        return ResolvedImage(src=build(normalize_legacy_path(subject.cover_image)))
    default = default_cover_for_country(subject.country_slug)
    if default is not None:
        return default.model_copy(update={"src": build(default.src)})
    return ResolvedImage(src=PLACEHOLDER_IMAGE)


def resolve_gallery(
    subject: MediaSubject,
    limit: int = DEFAULT_GALLERY_LIMIT,
    image_url: ImageUrlBuilder | None = None,
) -> list[ResolvedImage]:
    """Explicit gallery when it has entries, else the country default gallery."""
    build = image_url or _identity
    explicit = [src for src in subject.gallery if src and src.strip()]
    if explicit:
        return [
            ResolvedImage(src=build(normalize_legacy_path(src)))
            for src in explicit[: max(0, limit)]
        ]
    return [
        img.model_copy(update={"src": build(img.src)})
        for img in default_gallery_for_country(subject.country_slug, limit)
    ]


def all_gallery_images() -> list[ResolvedImage]:
    """Every bundled image, grouped by country in catalog order."""
    return [
        img
        for country in GALLERY_COUNTRIES
        for img in default_gallery_for_country(country.country_slug, len(country.images))
    ]
