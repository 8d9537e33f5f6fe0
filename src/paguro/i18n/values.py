"""Resolve a single display value from per-locale variants.

Two entry points share one fallback rule (requested locale, then the
other locale, then ``None``):

- ``pick_by_record(record, locale)`` for repository i18n objects
  (``{"it": ..., "en": ...}``) and ``LocalizedValue`` instances.
- ``pick_by_pair(locale, it, en)`` for call sites holding the two
  variants as separate fields (``titleIt`` / ``titleEn``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from paguro.i18n.locale import Locale

T = TypeVar("T")


class LocalizedValue(BaseModel, Generic[T]):
    """A value available in up to two locale variants."""

    model_config = ConfigDict(frozen=True)

    it: T | None = None
    en: T | None = None

    def get(self, locale: Locale) -> T | None:
        return self.en if locale is Locale.EN else self.it

    def resolve(self, locale: Locale) -> T | None:
        """Shorthand for ``pick_by_record(self, locale)``."""
        return pick_by_record(self, locale)


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def pick_by_pair(locale: Locale, it: T | None = None, en: T | None = None) -> T | None:
    """Return the variant for ``locale``, falling back to the other one."""
    first, second = (en, it) if locale is Locale.EN else (it, en)
    if _present(first):
        return first
    if _present(second):
        return second
    return None


def pick_by_record(
    record: LocalizedValue[T] | Mapping[str, T | None] | None,
    locale: Locale,
) -> T | None:
    """Resolve an i18n record for ``locale`` with fallback.

    Accepts a ``LocalizedValue`` or any mapping keyed by locale tag.
    ``None`` resolves to ``None``.
    """
    if record is None:
        return None
    if isinstance(record, LocalizedValue):
        return pick_by_pair(locale, record.it, record.en)
    return pick_by_pair(
        locale,
        record.get(Locale.IT.value),
        record.get(Locale.EN.value),
    )


def localized_label(
    title: str | None,
    title_i18n: Mapping[str, str | None] | None,
    locale: Locale,
) -> str:
    """Display label for taxonomy entries.

    Queries usually resolve ``title`` for the active locale already; the
    raw ``title_i18n`` object is only consulted for legacy or partial data.
    """
    if _present(title):
        return title  # type: ignore[return-value]
    if title_i18n:
        value = title_i18n.get(locale.value)
        if _present(value):
            return value  # type: ignore[return-value]
    return ""
