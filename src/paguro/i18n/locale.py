"""Supported site locales and input normalization."""

from __future__ import annotations

from enum import StrEnum


class Locale(StrEnum):
    """Language tag used for content and routing."""

    IT = "it"
    EN = "en"

    @classmethod
    def default(cls) -> Locale:
        """Return the locale used when nothing better is known."""
        return cls.IT

    @property
    def other(self) -> Locale:
        """The opposite locale, used for fallback and language toggles."""
        return Locale.IT if self is Locale.EN else Locale.EN

    def label(self) -> str:
        """Human readable label for CLI output and logging."""
        return "English" if self is Locale.EN else "Italiano"


DEFAULT_LOCALE = Locale.default()

SUPPORTED_LOCALES: tuple[Locale, ...] = (Locale.IT, Locale.EN)


def normalize_locale(value: object) -> Locale:
    """Coerce any input to a supported locale.

    Only the alternate tag ``"en"`` is recognized; everything else,
    including ``None`` and malformed values, maps to the default.
    """
    if value == Locale.EN.value:
        return Locale.EN
    return DEFAULT_LOCALE
