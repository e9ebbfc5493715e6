"""
Data Transfer Objects (DTOs) Module

DTOs are used to transfer data between layers and to/from the API.
They use Pydantic for validation and serialization.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from livescore_seo.domain.entities.entities import SeoEntry, SeoRobots
from livescore_seo.utils.time_utils import get_current_time


class CamelModel(BaseModel):
    """Base for response DTOs: snake_case in Python, camelCase in JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ============================================================
# Metadata DTOs
# ============================================================

class SeoRobotsDTO(CamelModel):
    """Structured robots directive."""
    index: bool = True
    follow: bool = True


class OgImageDTO(CamelModel):
    """Open Graph image."""
    url: str
    width: int = 1200
    height: int = 630
    alt: Optional[str] = None


class OpenGraphDTO(CamelModel):
    """Open Graph block."""
    type: str = "website"
    site_name: str
    title: str
    description: str
    url: str
    images: list[OgImageDTO] = Field(default_factory=list)
    locale: Optional[str] = None


class TwitterDTO(CamelModel):
    """Twitter card block."""
    card: str = "summary_large_image"
    title: str
    description: str
    images: list[str] = Field(default_factory=list)


class AlternatesDTO(CamelModel):
    canonical: str


class IconsDTO(CamelModel):
    icon: str


class SeoMetadataDTO(CamelModel):
    """Render-ready page metadata."""
    metadata_base: Optional[str] = None
    title: str
    description: str
    keywords: Optional[list[str]] = None
    alternates: AlternatesDTO
    icons: IconsDTO
    theme_color: Optional[str] = None
    open_graph: OpenGraphDTO
    twitter: TwitterDTO
    robots: SeoRobotsDTO
    json_ld: Optional[Dict[str, Any]] = None


# ============================================================
# Entry DTOs
# ============================================================

class SeoBreadcrumbDTO(CamelModel):
    name: str
    url: str


class SeoImageAltDTO(CamelModel):
    src: str
    alt: str


class SeoEntryDTO(CamelModel):
    """Resolved SEO entry."""
    title: str
    description: str
    h1: str
    canonical: Optional[str] = None
    primary_keyword: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    robots: Optional[SeoRobotsDTO | str] = None
    json_ld: Optional[Dict[str, Any]] = None
    breadcrumbs: list[SeoBreadcrumbDTO] = Field(default_factory=list)
    image_alts: list[SeoImageAltDTO] = Field(default_factory=list)
    internal_links: list[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: SeoEntry) -> "SeoEntryDTO":
        robots = entry.robots
        if isinstance(robots, SeoRobots):
            robots = SeoRobotsDTO(index=robots.index, follow=robots.follow)
        return cls(
            title=entry.title,
            description=entry.description,
            h1=entry.h1,
            canonical=entry.canonical,
            primary_keyword=entry.primary_keyword,
            keywords=list(entry.keywords),
            og_title=entry.og_title,
            og_description=entry.og_description,
            og_image=entry.og_image,
            robots=robots,
            json_ld=entry.json_ld,
            breadcrumbs=[SeoBreadcrumbDTO.model_validate(b) for b in entry.breadcrumbs],
            image_alts=[SeoImageAltDTO.model_validate(i) for i in entry.image_alts],
            internal_links=[dict(link) for link in entry.internal_links],
        )


class ResolvedSeoDTO(CamelModel):
    """Response of every resolver endpoint."""
    entry: SeoEntryDTO
    metadata: SeoMetadataDTO
    canonical_path: str


# ============================================================
# Brand & utility DTOs
# ============================================================

class BrandDTO(CamelModel):
    """Public brand payload for the site header and footer."""

    site_name: str
    logo_title: str
    logo_url: str
    tagline: str = ""
    site_url: str
    favicon_url: str = "/favicon.ico"
    theme_color: Optional[str] = None
    sport_labels: Dict[str, str] = Field(default_factory=dict)
    header: Dict[str, Any] = Field(default_factory=dict)
    footer: Dict[str, Any] = Field(default_factory=dict)


class HealthResponseDTO(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=get_current_time)


class ErrorResponseDTO(BaseModel):
    """Error response."""
    error: str
    message: str
    details: Optional[dict] = None
