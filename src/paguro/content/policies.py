"""Freshness policies for live content queries.

Each query type tolerates a different amount of staleness: the blog
index changes often, taxonomies almost never. Preview reads ignore
these policies entirely.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FreshnessPolicy(BaseModel):
    """Maximum age of a cached live result before it must be refetched."""

    model_config = ConfigDict(frozen=True)

    name: str
    revalidate_seconds: int = Field(ge=0)

    @property
    def cacheable(self) -> bool:
        return self.revalidate_seconds > 0


_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

NO_STORE = FreshnessPolicy(name="no-store", revalidate_seconds=0)
BLOG_INDEX = FreshnessPolicy(name="blog-index", revalidate_seconds=5)
ABOUT = FreshnessPolicy(name="about", revalidate_seconds=_MINUTE)
POST = FreshnessPolicy(name="post", revalidate_seconds=_HOUR)
HOME = FreshnessPolicy(name="home", revalidate_seconds=_HOUR)
COUNTRIES_WITH_POSTS = FreshnessPolicy(name="countries-with-posts", revalidate_seconds=_HOUR)
GALLERY = FreshnessPolicy(name="gallery", revalidate_seconds=_DAY)
DESTINATIONS = FreshnessPolicy(name="destinations", revalidate_seconds=_DAY)
WORLD_REGIONS = FreshnessPolicy(name="world-regions", revalidate_seconds=_DAY)

ALL_POLICIES: tuple[FreshnessPolicy, ...] = (
    NO_STORE,
    BLOG_INDEX,
    ABOUT,
    POST,
    HOME,
    COUNTRIES_WITH_POSTS,
    GALLERY,
    DESTINATIONS,
    WORLD_REGIONS,
)
