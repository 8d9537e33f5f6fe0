"""Preview (draft) mode capability.

The content layer only ever sees a boolean "preview enabled" flag. How
that flag is earned is behind ``PreviewAuthorizer``; the default
implementation checks a shared secret from the CMS preview link.
"""

from __future__ import annotations

import hmac
import logging
import urllib.parse
from typing import Protocol

logger = logging.getLogger(__name__)


class PreviewAuthorizer(Protocol):
    """Decides whether a request may see draft content."""

    def is_authorized(self, secret: str | None) -> bool: ...


class SecretPreviewAuthorizer:
    """Authorizes requests carrying the configured preview secret.

    An empty configured secret authorizes nothing.
    """

    def __init__(self, expected: str) -> None:
        self._expected = expected

    def is_authorized(self, secret: str | None) -> bool:
        if not self._expected or not secret:
            return False
        return hmac.compare_digest(secret.encode("utf-8"), self._expected.encode("utf-8"))


def preview_enabled(authorizer: PreviewAuthorizer | None, secret: str | None) -> bool:
    """Resolve the preview flag; absent authorizer or bad secret means live."""
    if authorizer is None:
        return False
    allowed = authorizer.is_authorized(secret)
    if secret and not allowed:
        logger.info("Rejected preview request with an invalid secret")
    return allowed


def preview_url(slug: str | None, base_url: str, secret: str) -> str | None:
    """Link the CMS opens to preview a document, or None without a slug."""
    if not slug:
        return None
    query = urllib.parse.urlencode({"secret": secret, "slug": slug})
    return f"{base_url.rstrip('/')}/api/draft?{query}"


def safe_redirect(target: str | None) -> str:
    """Only site-relative redirects are honoured after leaving preview."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return "/"
