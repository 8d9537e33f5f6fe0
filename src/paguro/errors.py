"""Exception hierarchy for paguro.

Normalizers (locale, paths, localized values) never raise. Everything
that talks to the content repository raises ``ContentRepositoryError``
or a subclass, unmodified by retries or defaults.
"""

from __future__ import annotations


class PaguroError(Exception):
    """Base error for paguro."""


class ConfigurationError(PaguroError):
    """Required settings are missing or invalid."""


class ContentRepositoryError(PaguroError):
    """The content repository could not be reached or rejected the query."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedResponseError(ContentRepositoryError):
    """The repository answered with a structurally invalid payload."""
