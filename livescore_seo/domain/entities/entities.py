"""
Domain Entities Module

This module contains the core domain entities for SEO metadata resolution.
These entities represent page-level metadata and the sports entities it is
built from, independent of any infrastructure.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class SeoRobots:
    """
    Structured robots directive.

    Attributes:
        index: Whether search engines may index the page
        follow: Whether search engines may follow links on the page
    """
    index: bool = True
    follow: bool = True


@dataclass(frozen=True)
class SeoBreadcrumb:
    """Breadcrumb item."""
    name: str
    url: str


@dataclass(frozen=True)
class SeoImageAlt:
    """Alt text for an image used on the page."""
    src: str
    alt: str


@dataclass(frozen=True)
class SeoEntry:
    """
    Resolved page-level SEO record before final rendering.

    Entries are built fresh for every resolution and never mutated; applying
    an override produces a new entry.

    Attributes:
        title: Page title (required)
        description: Meta description (required)
        h1: Visible page heading (required)
        canonical: Canonical route path (e.g. "/match/football/123/summary/")
        primary_keyword: Main keyword targeted by the page
        keywords: Keyword list
        og_title: Open Graph title override
        og_description: Open Graph description override
        og_image: Open Graph image path or absolute URL
        robots: Structured directive or free-text string ("noindex, follow")
        json_ld: Structured data object
        breadcrumbs: Breadcrumb trail
        image_alts: Alt text map for page images
        internal_links: Related links ({"label", "href"})
    """
    title: str
    description: str
    h1: str
    canonical: Optional[str] = None
    primary_keyword: Optional[str] = None
    keywords: tuple = ()
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    robots: Union[SeoRobots, str, None] = None
    json_ld: Optional[dict] = None
    breadcrumbs: tuple = ()
    image_alts: tuple = ()
    internal_links: tuple = ()

    def __post_init__(self):
        # Lists coming from JSON are frozen into tuples
        for name in ("keywords", "breadcrumbs", "image_alts", "internal_links"):
            value = getattr(self, name)
            if value is None:
                object.__setattr__(self, name, ())
            elif not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **defaults: Any) -> "SeoEntry":
        """
        Build an entry from a snake_case mapping (e.g. a dumped store patch).

        Args:
            data: Field values; unknown keys and None values are ignored
            defaults: Values used when the mapping lacks a required field
        """
        values = dict(defaults)
        values.update(_coerce_patch(data))
        for required in ("title", "description", "h1"):
            values.setdefault(required, "")
        return cls(**values)

    def with_patch(self, patch: Optional[Mapping[str, Any]]) -> "SeoEntry":
        """Return a copy with every non-None field from ``patch`` applied on top."""
        if not patch:
            return self
        changes = _coerce_patch(patch)
        if not changes:
            return self
        return replace(self, **changes)


_ENTRY_FIELDS = {f.name for f in fields(SeoEntry)}


def _coerce_patch(patch: Mapping[str, Any]) -> dict:
    changes = {}
    for key, value in patch.items():
        if key not in _ENTRY_FIELDS or value is None:
            continue
        if key == "robots" and isinstance(value, Mapping):
            value = SeoRobots(
                index=value.get("index") is not False,
                follow=value.get("follow") is not False,
            )
        elif key == "breadcrumbs":
            value = tuple(
                b if isinstance(b, SeoBreadcrumb) else SeoBreadcrumb(name=b["name"], url=b["url"])
                for b in value
            )
        elif key == "image_alts":
            value = tuple(
                i if isinstance(i, SeoImageAlt) else SeoImageAlt(src=i["src"], alt=i["alt"])
                for i in value
            )
        changes[key] = value
    return changes


@dataclass(frozen=True)
class MatchData:
    """
    Normalized snapshot of one fetched match.

    Attributes:
        sport: Canonical sport key
        id: Provider match id
        home_name: Home side name
        away_name: Away side name
        home_logo: Home side logo URL
        away_logo: Away side logo URL
        home_score: Home score if available
        away_score: Away score if available
        date_iso: Kick-off date in ISO format
        status_short: Provider status short code (e.g. "FT", "PST")
        league_name: Competition name
        league_country: Competition country
        is_live: Whether the status code means the game is in progress
    """
    sport: str
    id: str
    home_name: str
    away_name: str
    home_logo: Optional[str] = None
    away_logo: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    date_iso: Optional[str] = None
    status_short: Optional[str] = None
    league_name: Optional[str] = None
    league_country: Optional[str] = None
    is_live: bool = False

    @property
    def score_text(self) -> Optional[str]:
        """Score formatted as "2 - 1", or None when either side is unknown."""
        if self.home_score is None or self.away_score is None:
            return None
        return f"{self.home_score} - {self.away_score}"


@dataclass(frozen=True)
class LeagueData:
    """Normalized snapshot of one fetched league."""
    id: str
    name: str
    country: str
    logo: Optional[str] = None
    season: Optional[str] = None


@dataclass(frozen=True)
class PlayerData:
    """Normalized snapshot of one fetched player."""
    name: str
    team_name: str = ""
    photo: Optional[str] = None
    nationality: Optional[str] = None


@dataclass(frozen=True)
class ResolvedSeo:
    """
    Final output of a resolver operation.

    Attributes:
        entry: The normalized entry
        metadata: Render-ready metadata object
        canonical_path: Route path the canonical URL was built from
    """
    entry: SeoEntry
    metadata: Any
    canonical_path: str = "/"
