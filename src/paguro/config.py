"""Unified configuration loaded from .paguro.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from paguro.integrations.sanity import DEFAULT_API_VERSION, SanityConfig
from paguro.integrations.youtube import YouTubeConfig
from paguro.preview import SecretPreviewAuthorizer

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".paguro.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "paguro" / "config.toml"


class SanitySectionConfig(BaseModel):
    """[sanity] section."""

    project_id: str = ""
    dataset: str = ""
    api_version: str = DEFAULT_API_VERSION
    token: str = ""
    use_cdn: bool = True
    timeout_seconds: float = Field(default=10.0, gt=0)


class PreviewSectionConfig(BaseModel):
    """[preview] section."""

    secret: str = ""
    site_url: str = "http://localhost:3000"


class YouTubeSectionConfig(BaseModel):
    """[youtube] section."""

    api_key: str = ""
    channel_id: str = ""


class SearchSectionConfig(BaseModel):
    """[search] section."""

    default_limit: int = Field(default=12, ge=6, le=24)
    min_query_length: int = Field(default=3, ge=1)


class PaguroConfig(BaseModel):
    """Top-level configuration model."""

    sanity: SanitySectionConfig = Field(default_factory=SanitySectionConfig)
    preview: PreviewSectionConfig = Field(default_factory=PreviewSectionConfig)
    youtube: YouTubeSectionConfig = Field(default_factory=YouTubeSectionConfig)
    search: SearchSectionConfig = Field(default_factory=SearchSectionConfig)

    def to_sanity_config(self) -> SanityConfig:
        """Convert to SanityConfig for the query client."""
        return SanityConfig(
            project_id=self.sanity.project_id,
            dataset=self.sanity.dataset,
            api_version=self.sanity.api_version,
            token=self.sanity.token,
            use_cdn=self.sanity.use_cdn,
            timeout_seconds=self.sanity.timeout_seconds,
        )

    def to_youtube_config(self) -> YouTubeConfig:
        return YouTubeConfig(
            api_key=self.youtube.api_key,
            channel_id=self.youtube.channel_id,
        )

    def preview_authorizer(self) -> SecretPreviewAuthorizer:
        return SecretPreviewAuthorizer(self.preview.secret)


def load_config(path: str | Path | None = None) -> PaguroConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .paguro.toml in CWD
    3. ~/.config/paguro/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged PaguroConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = PaguroConfig.model_validate(data) if data else PaguroConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: PaguroConfig, **cli_kwargs: object) -> PaguroConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "project_id": ("sanity", "project_id"),
        "dataset": ("sanity", "dataset"),
        "token": ("sanity", "token"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return PaguroConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PaguroConfig) -> PaguroConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "SANITY_PROJECT_ID": ("sanity", "project_id"),
        "SANITY_DATASET": ("sanity", "dataset"),
        "SANITY_API_VERSION": ("sanity", "api_version"),
        "SANITY_API_READ_TOKEN": ("sanity", "token"),
        "SANITY_PREVIEW_SECRET": ("preview", "secret"),
        "PAGURO_SITE_URL": ("preview", "site_url"),
        "YOUTUBE_API_KEY": ("youtube", "api_key"),
        "YOUTUBE_CHANNEL_ID": ("youtube", "channel_id"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    cdn_raw = os.environ.get("SANITY_USE_CDN")
    if cdn_raw is not None:
        data["sanity"]["use_cdn"] = cdn_raw.lower() in ("true", "1", "yes")

    return PaguroConfig.model_validate(data)
