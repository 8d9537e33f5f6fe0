"""Locale handling: supported locales, localized paths and value fallback."""

from paguro.i18n.locale import DEFAULT_LOCALE, SUPPORTED_LOCALES, Locale, normalize_locale
from paguro.i18n.paths import (
    ensure_locale_prefix,
    locale_from_path,
    strip_locale_prefix,
    toggle_locale_path,
)
from paguro.i18n.values import LocalizedValue, localized_label, pick_by_pair, pick_by_record

__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LOCALES",
    "Locale",
    "LocalizedValue",
    "ensure_locale_prefix",
    "locale_from_path",
    "localized_label",
    "normalize_locale",
    "pick_by_pair",
    "pick_by_record",
    "strip_locale_prefix",
    "toggle_locale_path",
]
