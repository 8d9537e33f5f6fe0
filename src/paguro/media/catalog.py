"""Country-grouped catalog of bundled destination images.

Source of the default cover and gallery for each country when a post or
destination has no images of its own. Base paths still use the legacy
``/destinations/{country}`` shape; resolvers normalize them on the way out.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from paguro.content.models import Orientation


class CatalogImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    alt: str | None = None
    orientation: Orientation | None = None


class CountryMedia(BaseModel):
    model_config = ConfigDict(frozen=True)

    country_slug: str
    base_path: str
    images: tuple[CatalogImage, ...] = Field(default_factory=tuple)

    def path_for(self, image: CatalogImage) -> str:
        return f"{self.base_path}/{image.filename}"


def _country(slug: str, *images: CatalogImage) -> CountryMedia:
    return CountryMedia(country_slug=slug, base_path=f"/destinations/{slug}", images=images)


GALLERY_COUNTRIES: tuple[CountryMedia, ...] = (
    _country(
        "antigua",
        CatalogImage(filename="antigua-drone-10.jpg"),
        CatalogImage(filename="antigua-drone-20.jpg"),
        CatalogImage(filename="antigua-volti-di-antigua.jpg"),
    ),
    _country(
        "china",
        CatalogImage(filename="campi-terrazzati-yuan-yang.jpg"),
        CatalogImage(filename="cina-ponte-guangxi.jpg"),
        CatalogImage(filename="mattia-tiger-leaping-gorge.jpg", orientation="landscape"),
    ),
    _country(
        "costarica",
        CatalogImage(filename="costarica-drone-010.jpg"),
        CatalogImage(filename="costarica-drone-020.jpg"),
        CatalogImage(filename="costarica-drone-030.jpg"),
    ),
    _country(
        "guatemala",
        CatalogImage(filename="guatemala-chichi-10.jpg"),
        CatalogImage(filename="guatemala-chichi.jpg"),
        CatalogImage(filename="guatemala-mattia-cammina-chichi.jpg"),
        CatalogImage(filename="guatemala-piramide-20.jpg"),
        CatalogImage(filename="guatemala-piramide-stretto.jpg"),
        CatalogImage(filename="guatemala-piramide.jpg"),
        CatalogImage(filename="guatemala-san-juan.jpg"),
        CatalogImage(filename="guatemala-vale-cammina.jpg"),
        CatalogImage(filename="guatemala-vale-datch-angle.jpg"),
        CatalogImage(filename="guatemala-vale-piramide.jpg"),
        CatalogImage(filename="guatemala-vale-spalle-yaxha.jpg"),
        CatalogImage(filename="mattia-vlogga-guatemala.jpg"),
    ),
    _country(
        "mongolia",
        CatalogImage(filename="vale-duna-gobi.jpg"),
        CatalogImage(filename="vale-mattia-in-tenda.jpg"),
        CatalogImage(filename="valentina-on-the-road.jpg"),
    ),
)

_BY_SLUG: dict[str, CountryMedia] = {c.country_slug: c for c in GALLERY_COUNTRIES}


def country_media(slug: str | None) -> CountryMedia | None:
    if not slug:
        return None
    return _BY_SLUG.get(slug)
