"""
SEO Store Schema

Typed shape of the merged SEO configuration. Layers are merged as plain JSON
mappings (camelCase keys, exactly as admins write them) and validated into
these models once per rebuild. Every field carries a compiled default, so
``SeoStore()`` is always a complete, usable store.
"""

import os
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


SITE_NAME = "Live Score"
DEFAULT_SITE_URL = "https://livesoccerr.com"
DEFAULT_OG_IMAGE = "/og.png"


def _default_site_url() -> str:
    return (os.getenv("SITE_URL") or DEFAULT_SITE_URL).rstrip("/")


class StoreModel(BaseModel):
    """Base for store sections: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ============================================================
# Entry shapes
# ============================================================

class RobotsConfig(StoreModel):
    """Structured robots directive as stored in configuration."""
    index: Optional[bool] = None
    follow: Optional[bool] = None


class BreadcrumbConfig(StoreModel):
    name: str
    url: str


class ImageAltConfig(StoreModel):
    src: str
    alt: str


class SeoEntryPatch(StoreModel):
    """
    Partial SEO entry used by ``home``, ``pages`` and ``overrides``.

    All fields are optional; unset fields leave the underlying entry alone.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    h1: Optional[str] = None
    primary_keyword: Optional[str] = None
    keywords: Optional[List[str]] = None
    canonical: Optional[str] = None
    json_ld: Optional[Dict[str, Any]] = None
    internal_links: Optional[List[Dict[str, str]]] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    robots: Union[RobotsConfig, str, None] = None
    breadcrumbs: Optional[List[BreadcrumbConfig]] = None
    image_alts: Optional[List[ImageAltConfig]] = None

    def as_entry_fields(self) -> dict:
        """Snake_case mapping of the fields that are actually set."""
        return self.model_dump(exclude_none=True)


# ============================================================
# Brand
# ============================================================

class BrandConfig(StoreModel):
    """Site identity. Unknown keys are kept so admins can add new brand fields."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    site_name: str = SITE_NAME
    site_url: str = Field(default_factory=_default_site_url)
    site_domain: str = "livesoccerr.com"
    tagline: str = "Soccer Scores. Right Now."
    logo_title: str = "LiveSocceRR Scores"
    logo_url: str = "/brand/logo.svg"
    title_prefix: str = ""
    title_suffix: str = ""
    default_og_image: str = DEFAULT_OG_IMAGE
    default_meta_description: str = (
        "Live scores, results, fixtures and stats across football, basketball, "
        "NFL, hockey, rugby, volleyball and more."
    )
    locale: str = "en_US"
    favicon_url: Optional[str] = None
    theme_color: Optional[str] = None


# ============================================================
# Domain templates (match / league / player)
# ============================================================

class OgTemplateConfig(StoreModel):
    use_dynamic_banner: bool = False
    banner_path: Optional[str] = None
    fallback_image: str = DEFAULT_OG_IMAGE


class SchemaToggle(StoreModel):
    enabled: bool = True


class DomainTemplates(StoreModel):
    """
    Per-domain title/description templates.

    Attributes:
        revalidate_seconds: How long rendered pages may be reused downstream
        api_timeout_ms: Timeout for the entity fetch behind this domain
        primary_keyword: Keyword appended to generated keyword lists
        title_patterns: Rotating title variants, picked per entity id
        description_pattern: Meta description template
        h1_pattern: Heading template
        og: Open Graph image settings
        structured_data: JSON-LD toggle (``schema`` in JSON)
    """
    revalidate_seconds: int = 60
    api_timeout_ms: int = 1500
    primary_keyword: str = ""
    title_patterns: List[str] = Field(default_factory=list)
    description_pattern: str = ""
    h1_pattern: str = ""
    og: OgTemplateConfig = Field(default_factory=OgTemplateConfig)
    structured_data: SchemaToggle = Field(default_factory=SchemaToggle, alias="schema")


def _match_templates() -> DomainTemplates:
    return DomainTemplates(
        revalidate_seconds=60,
        api_timeout_ms=650,
        primary_keyword="live score",
        title_patterns=[
            "MATCH: {home} vs {away} – Score, Lineups & Stats",
            "MATCH: {home} vs {away} – Score & Lineups",
            "{home} vs {away} Live Score",
        ],
        description_pattern=(
            "Watch live score updates of {home} vs {away} with goals, lineups, news "
            "& match timeline. Fast updates on {brand}."
        ),
        h1_pattern="MATCH: {home} vs {away} – Live Score",
        og=OgTemplateConfig(
            use_dynamic_banner=True,
            banner_path="/og/match/{sport}/{id}",
            fallback_image=DEFAULT_OG_IMAGE,
        ),
    )


def _player_templates() -> DomainTemplates:
    return DomainTemplates(
        revalidate_seconds=3600,
        api_timeout_ms=1500,
        primary_keyword="player profile",
        title_patterns=[
            "{name} ({team}) – Profile, Stats & News",
            "{name} Stats – {team} Player Profile",
            "{name} – Career Stats & Goals",
        ],
        description_pattern=(
            "{name} plays for {team}. View complete player profile, stats, goals, "
            "match history and market value on {brand}."
        ),
        h1_pattern="{name} – Player Profile",
    )


def _league_templates() -> DomainTemplates:
    return DomainTemplates(
        revalidate_seconds=86400,
        api_timeout_ms=2000,
        primary_keyword="league table",
        title_patterns=[
            "{name} ({country}) – Live Scores, Standings & Fixtures",
            "{name} {season} Table & Results – {brand}",
        ],
        description_pattern=(
            "Follow {name} ({season}) live scores, results, fixtures, and standings. "
            "Get real-time updates for {name} in {country} on {brand}."
        ),
        h1_pattern="{name} – Live Scores & Standings",
    )


# ============================================================
# Labels & global sections
# ============================================================

class LabelsConfig(StoreModel):
    sport_labels: Dict[str, str] = Field(default_factory=lambda: {
        "football": "Football",
        "soccer": "Football",
        "basketball": "Basketball",
        "nfl": "NFL",
        "american-football": "NFL",
        "hockey": "Hockey",
        "ice-hockey": "Hockey",
        "baseball": "Baseball",
        "rugby": "Rugby",
        "volleyball": "Volleyball",
    })
    sports_tab_labels: Dict[str, str] = Field(default_factory=lambda: {
        "all": "Today",
        "today": "Today",
        "live": "Live Now",
        "finished": "Final Scores",
        "scheduled": "Upcoming Fixtures",
    })
    match_tab_labels: Dict[str, str] = Field(default_factory=lambda: {
        "summary": "Score, Lineups & Stats",
        "stats": "Stats",
        "statistics": "Stats",
        "lineups": "Lineups",
        "h2h": "Head-to-Head",
        "standings": "Standings",
        "odds": "Odds",
        "results": "Result",
        "fixtures": "Fixture",
    })


class SportNavItem(StoreModel):
    id: str
    icon: str = ""


class HeaderNavConfig(StoreModel):
    desktop_visible_count: int = 6
    mobile_top: List[str] = Field(default_factory=lambda: ["football", "basketball", "nfl"])
    all_sports: List[SportNavItem] = Field(default_factory=lambda: [
        SportNavItem(id="football", icon="⚽"),
        SportNavItem(id="basketball", icon="🏀"),
        SportNavItem(id="nfl", icon="🏈"),
        SportNavItem(id="baseball", icon="⚾"),
        SportNavItem(id="hockey", icon="🏒"),
        SportNavItem(id="rugby", icon="🏉"),
        SportNavItem(id="volleyball", icon="🏐"),
    ])


class HeaderConfig(StoreModel):
    nav: HeaderNavConfig = Field(default_factory=HeaderNavConfig)


class FooterConfig(StoreModel):
    about_text: str = (
        "LiveSocceRR delivers fast live scores, results, fixtures and stats across "
        "football, basketball, NFL, hockey, rugby, volleyball and more."
    )
    app_links: Dict[str, str] = Field(default_factory=dict)
    socials: Dict[str, str] = Field(default_factory=dict)


class OgDefaultsConfig(StoreModel):
    type: str = "website"
    fallback_image: Optional[str] = DEFAULT_OG_IMAGE
    image_alt: Optional[str] = (
        "Live Scores for Football, Basketball, NFL, Hockey, Rugby, Volleyball & More"
    )


class TwitterDefaultsConfig(StoreModel):
    card: str = "summary_large_image"
    fallback_image: Optional[str] = DEFAULT_OG_IMAGE


class GlobalDefaults(StoreModel):
    robots: Union[RobotsConfig, str, None] = "index, follow"
    keywords: Optional[List[str]] = None
    og: OgDefaultsConfig = Field(default_factory=OgDefaultsConfig)
    twitter: TwitterDefaultsConfig = Field(default_factory=TwitterDefaultsConfig)


class AutoSettings(StoreModel):
    auto_title_pattern: Optional[str] = None
    auto_description_pattern: Optional[str] = None
    auto_schema: bool = True


# ============================================================
# Store
# ============================================================

def _home_entry() -> SeoEntryPatch:
    return SeoEntryPatch(
        title=(
            "Live Soccer & All Sports Scores | Football, Basketball, NFL, Hockey – "
            f"{SITE_NAME}"
        ),
        description=(
            "Get live scores, results, fixtures, and updates for football, basketball, "
            "NFL, baseball, hockey, rugby, volleyball, and more. Follow your favorite "
            f"teams in real-time at {SITE_NAME}!"
        ),
        h1="Live Scores for Football, Basketball, NFL, Hockey, Rugby, Volleyball & More",
        primary_keyword="live soccer scores",
        keywords=[
            "live scores",
            "soccer scores",
            "football live scores",
            "basketball live scores",
            "nfl live scores",
            "hockey live scores",
            "baseball live scores",
            "rugby live scores",
            "volleyball live scores",
        ],
        canonical="/",
    )


def _default_pages() -> Dict[str, SeoEntryPatch]:
    privacy = SeoEntryPatch(
        title=f"Privacy Policy | {SITE_NAME}",
        description=f"Privacy Policy for {SITE_NAME}. Learn how we handle your data.",
        h1="Privacy Policy",
    )
    terms = SeoEntryPatch(
        title=f"Terms of Service | {SITE_NAME}",
        description=f"Terms and conditions for using {SITE_NAME}.",
        h1="Terms of Service",
    )
    contact = SeoEntryPatch(
        title=f"Contact Us | {SITE_NAME}",
        description=f"Contact the {SITE_NAME} team for support or inquiries.",
        h1="Contact Us",
    )
    # Dashed keys are kept for configs written before the camelCase keys existed
    return {
        "privacyPolicy": privacy,
        "termsOfService": terms,
        "contact": contact,
        "privacy-policy": privacy.model_copy(),
        "terms-of-service": terms.model_copy(),
    }


class SeoStore(StoreModel):
    """
    Fully merged SEO configuration snapshot.

    Instances are treated as immutable values: the config provider rebuilds
    or swaps them, it never edits one in place.
    """
    brand: BrandConfig = Field(default_factory=BrandConfig)
    home: SeoEntryPatch = Field(default_factory=_home_entry)
    pages: Dict[str, SeoEntryPatch] = Field(default_factory=_default_pages)
    overrides: Dict[str, SeoEntryPatch] = Field(default_factory=dict)
    labels: LabelsConfig = Field(default_factory=LabelsConfig)
    match: DomainTemplates = Field(default_factory=_match_templates)
    player: DomainTemplates = Field(default_factory=_player_templates)
    league: DomainTemplates = Field(default_factory=_league_templates)
    header: Optional[HeaderConfig] = Field(default_factory=HeaderConfig)
    footer: Optional[FooterConfig] = Field(default_factory=FooterConfig)
    defaults: Optional[GlobalDefaults] = Field(default_factory=GlobalDefaults)
    auto: Optional[AutoSettings] = Field(default_factory=AutoSettings)

    def to_layer(self) -> dict:
        """JSON-shaped (camelCase) mapping suitable for deep merging."""
        return self.model_dump(by_alias=True)

    def find_override(self, *keys: str) -> Optional[SeoEntryPatch]:
        """Return the first override present for ``keys``, most specific first."""
        for key in keys:
            override = self.overrides.get(key)
            if override is not None:
                return override
        return None

    def sport_label(self, sport: str) -> str:
        return self.labels.sport_labels.get(sport) or sport
