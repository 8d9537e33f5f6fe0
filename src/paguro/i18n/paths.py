"""Locale segments on site paths.

Every localized route lives under ``/it`` or ``/en``. These helpers add,
remove and swap that leading segment without touching the rest of the
path, and leave external links and in-page anchors alone.

Examples::

    ensure_locale_prefix(Locale.IT, "/")         -> "/it"
    ensure_locale_prefix(Locale.EN, "/blog")     -> "/en/blog"
    ensure_locale_prefix(Locale.IT, "/en/blog")  -> "/en/blog"
    strip_locale_prefix("/it/blog")              -> "/blog"
    toggle_locale_path("/it/blog", Locale.IT)    -> "/en/blog"
"""

from __future__ import annotations

import re

from paguro.i18n.locale import SUPPORTED_LOCALES, Locale, normalize_locale

_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:")

_LOCALE_SEGMENT_RE = re.compile(
    r"^/(" + "|".join(loc.value for loc in SUPPORTED_LOCALES) + r")(?=/|$)"
)


def is_external_href(href: str) -> bool:
    """Return True for links that leave the site."""
    return href.startswith(_EXTERNAL_PREFIXES)


def is_fragment_only(href: str) -> bool:
    return href.startswith("#")


def has_locale_prefix(path: str) -> bool:
    """Check whether the path already starts with a whole locale segment."""
    return _LOCALE_SEGMENT_RE.match(path) is not None


def locale_from_path(path: str) -> Locale:
    """Read the active locale from a path, falling back to the default."""
    match = _LOCALE_SEGMENT_RE.match(path or "")
    return normalize_locale(match.group(1) if match else None)


def ensure_locale_prefix(locale: Locale, path: str) -> str:
    """Prefix an internal path with the locale segment.

    Already-prefixed paths are returned as is, so applying this twice
    gives the same result as applying it once.
    """
    if not path or path == "/":
        return f"/{locale.value}"
    if is_external_href(path) or is_fragment_only(path):
        return path
    if has_locale_prefix(path):
        return path
    normalized = path if path.startswith("/") else f"/{path}"
    return f"/{locale.value}{normalized}"


def strip_locale_prefix(path: str) -> str:
    """Remove a leading locale segment, if any.

    Paths without a locale segment are returned unchanged; a bare
    locale segment becomes ``/``.
    """
    if not path:
        return "/"
    if not has_locale_prefix(path):
        return path
    rest = _LOCALE_SEGMENT_RE.sub("", path, count=1)
    return rest or "/"


def toggle_locale_path(path: str, current: Locale) -> str:
    """Compute the same path in the other locale."""
    if path and (is_external_href(path) or is_fragment_only(path)):
        return path
    target = current.other
    rest = strip_locale_prefix(path)
    if rest == "/":
        return f"/{target.value}"
    if not rest.startswith("/"):
        rest = f"/{rest}"
    return f"/{target.value}{rest}"
