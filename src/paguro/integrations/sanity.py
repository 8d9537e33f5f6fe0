"""Sanity content repository: config and HTTP query client.

Executes GROQ queries over the Sanity HTTP query API via urllib. Live
reads go through the CDN with the ``published`` perspective; preview
reads hit the authenticated API host with the ``drafts`` perspective so
unpublished documents are visible.
"""

from __future__ import annotations

import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Protocol

from pydantic import BaseModel

from paguro.errors import ConfigurationError, ContentRepositoryError, MalformedResponseError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2026-01-13"

# Sanity rejects GET query URLs above ~11 kB; longer queries are POSTed.
MAX_GET_URL_LENGTH = 11_000


class ContentRepository(Protocol):
    """Anything that can execute a GROQ query and return its ``result``."""

    def query(self, groq: str, params: dict[str, Any], *, preview: bool = False) -> Any: ...


class SanityConfig(BaseModel):
    """Configuration for the Sanity query API."""

    project_id: str = ""
    dataset: str = ""
    api_version: str = DEFAULT_API_VERSION
    token: str = ""
    use_cdn: bool = True
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.project_id and self.dataset)

    @classmethod
    def from_env(cls) -> SanityConfig:
        """Create config from environment variables."""
        return cls(
            project_id=os.environ.get("SANITY_PROJECT_ID", ""),
            dataset=os.environ.get("SANITY_DATASET", ""),
            api_version=os.environ.get("SANITY_API_VERSION", "") or DEFAULT_API_VERSION,
            token=os.environ.get("SANITY_API_READ_TOKEN", ""),
        )


class SanityAPIClient:
    """Client for the Sanity HTTP query API.

    Raises ``ContentRepositoryError`` on transport or HTTP failures and
    ``MalformedResponseError`` when the body is not a query response.
    No retries are attempted.
    """

    def __init__(self, config: SanityConfig) -> None:
        if not config.project_id:
            raise ConfigurationError("Missing Sanity project id (SANITY_PROJECT_ID)")
        if not config.dataset:
            raise ConfigurationError("Missing Sanity dataset (SANITY_DATASET)")
        self.config = config

    def _base_url(self, preview: bool) -> str:
        host = "apicdn" if self.config.use_cdn and not preview else "api"
        return (
            f"https://{self.config.project_id}.{host}.sanity.io"
            f"/v{self.config.api_version}/data/query/{self.config.dataset}"
        )

    def _headers(self, preview: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if preview:
            if self.config.token:
                headers["Authorization"] = f"Bearer {self.config.token}"
            else:
                logger.warning("Preview query without a Sanity token; drafts will not be visible")
        return headers

    def build_request(
        self, groq: str, params: dict[str, Any], *, preview: bool = False
    ) -> urllib.request.Request:
        """Build a GET request, or a POST when the URL would be too long."""
        perspective = "drafts" if preview else "published"
        base = self._base_url(preview)
        headers = self._headers(preview)

        query_string: dict[str, str] = {"query": groq, "perspective": perspective}
        for key, value in params.items():
            query_string[f"${key}"] = json.dumps(value)
        url = f"{base}?{urllib.parse.urlencode(query_string)}"
        if len(url) <= MAX_GET_URL_LENGTH:
            return urllib.request.Request(url, method="GET", headers=headers)

        body = json.dumps({"query": groq, "params": params}).encode("utf-8")
        headers["Content-Type"] = "application/json"
        return urllib.request.Request(
            f"{base}?{urllib.parse.urlencode({'perspective': perspective})}",
            data=body,
            method="POST",
            headers=headers,
        )

    def query(self, groq: str, params: dict[str, Any], *, preview: bool = False) -> Any:
        """Execute a GROQ query and return its ``result`` member."""
        req = self.build_request(groq, params, preview=preview)
        logger.debug("Sanity %s query (preview=%s, %d chars)", req.get_method(), preview, len(groq))

        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            raise ContentRepositoryError(
                f"Sanity query failed with HTTP {exc.code}", status=exc.code
            ) from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            raise ContentRepositoryError(f"Sanity query failed: {exc}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedResponseError("Sanity response is not valid JSON") from exc

        if not isinstance(payload, dict) or "result" not in payload:
            raise MalformedResponseError("Sanity response has no 'result' member")

        logger.debug("Sanity query took %sms", payload.get("ms"))
        return payload["result"]
