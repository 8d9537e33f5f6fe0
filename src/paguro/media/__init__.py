"""Media helpers: legacy path rewriting and cover/gallery resolution."""

from paguro.media.resolver import (
    all_gallery_images,
    default_cover_for_country,
    default_gallery_for_country,
    normalize_legacy_path,
    resolve_cover,
    resolve_gallery,
)

__all__ = [
    "all_gallery_images",
    "default_cover_for_country",
    "default_gallery_for_country",
    "normalize_legacy_path",
    "resolve_cover",
    "resolve_gallery",
]
