"""
SEO Resolver Service

Single entry point the page layer calls for metadata. Every operation takes
one store snapshot, drafts an entry (from the store or a domain builder),
applies overrides, pins the canonical to the route, clamps the text fields
and renders the metadata object.

Resolution never fails because of a data provider or the database: those
degrade to generic strings and are logged.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from livescore_seo.application.dtos.dtos import (
    AlternatesDTO,
    IconsDTO,
    OgImageDTO,
    OpenGraphDTO,
    SeoMetadataDTO,
    SeoRobotsDTO,
    TwitterDTO,
)
from livescore_seo.domain.constants import (
    DEFAULT_MATCH_TAB,
    DEFAULT_SPORTS_TAB,
    STATIC_PAGE_DB_SLUGS,
    STATIC_PAGE_KEY_ALIASES,
    STATIC_PAGE_PATHS,
    STATIC_PAGE_SLUG_ALIASES,
)
from livescore_seo.domain.entities.entities import ResolvedSeo, SeoEntry
from livescore_seo.domain.entities.seo_store import SeoEntryPatch, SeoStore
from livescore_seo.domain.repositories.repositories import SeoSettingsRepository
from livescore_seo.domain.services.league_seo_service import LeagueSeoService
from livescore_seo.domain.services.match_seo_service import MatchSeoService
from livescore_seo.domain.services.player_seo_service import PlayerSeoService
from livescore_seo.infrastructure.config.seo_store_provider import SeoConfigProvider
from livescore_seo.utils.seo_utils import (
    apply_title_decorations,
    clamp_description,
    clamp_title,
    ensure_trailing_slash,
    full_url,
    normalize_sport,
    parse_robots,
    unique_non_empty,
)

logger = logging.getLogger(__name__)


DEFAULT_FAVICON = "/favicon.ico"

# Fields an admin page row may override
PAGE_OVERRIDE_FIELDS = (
    "title",
    "description",
    "h1",
    "primary_keyword",
    "keywords",
    "canonical",
    "og_title",
    "og_description",
    "og_image",
    "robots",
)


# ============================================================
# Helpers
# ============================================================

def normalize_slug(raw: Optional[str]) -> str:
    return str(raw or "").strip().strip("/")


def page_slug_candidates(slug: str) -> List[str]:
    """The slug followed by every legacy alias it may have been saved under."""
    normalized = normalize_slug(slug)
    aliases = STATIC_PAGE_SLUG_ALIASES.get(normalized, [])
    return unique_non_empty(normalize_slug(s) for s in [normalized, *aliases])


def extract_seo_from_unknown(data: Any) -> Optional[dict]:
    """
    Find the ``seo`` object in a page row.

    Accepts ``{"seo": {...}}`` and the wrapped forms
    ``{"page"|"data"|"payload"|"value": {"seo": {...}}}``.
    """
    if not isinstance(data, Mapping):
        return None
    seo = data.get("seo")
    if isinstance(seo, Mapping):
        return dict(seo)
    for wrapper in ("page", "data", "payload", "value"):
        nested = data.get(wrapper)
        if isinstance(nested, Mapping) and isinstance(nested.get("seo"), Mapping):
            return dict(nested["seo"])
    return None


def _patch_fields(patch: Optional[SeoEntryPatch]) -> dict:
    return patch.as_entry_fields() if patch is not None else {}


def clamp_entry(entry: SeoEntry) -> SeoEntry:
    changes = {
        "title": clamp_title(entry.title) or "",
        "description": clamp_description(entry.description) or "",
    }
    if entry.og_title:
        changes["og_title"] = clamp_title(entry.og_title)
    if entry.og_description:
        changes["og_description"] = clamp_description(entry.og_description)
    return replace(entry, **changes)


def to_metadata(store: SeoStore, entry: SeoEntry, canonical_path: str) -> SeoMetadataDTO:
    """
    Render an entry into the page metadata object.

    Title decorations are applied here and the result is clamped again, so a
    long suffix can never push a title past the limit.
    """
    brand = store.brand
    defaults = store.defaults
    og_defaults = defaults.og if defaults else None
    twitter_defaults = defaults.twitter if defaults else None

    canonical_url = full_url(brand.site_url, ensure_trailing_slash(entry.canonical or canonical_path))

    raw_title = entry.title or brand.site_name
    title = clamp_title(apply_title_decorations(raw_title, brand.site_name, brand.title_prefix, brand.title_suffix))

    raw_description = entry.description or brand.default_meta_description or ""
    description = clamp_description(raw_description) or ""

    og_title_raw = entry.og_title or raw_title
    og_title = clamp_title(apply_title_decorations(og_title_raw, brand.site_name, brand.title_prefix, brand.title_suffix))
    og_description = clamp_description(entry.og_description or raw_description) or ""

    og_image_raw = (
        entry.og_image
        or (og_defaults.fallback_image if og_defaults else None)
        or brand.default_og_image
    )
    og_image = full_url(brand.site_url, og_image_raw)

    robots = parse_robots(entry.robots if entry.robots else (defaults.robots if defaults else None))

    og_type = (og_defaults.type if og_defaults else None) or "website"
    og_alt = (og_defaults.image_alt if og_defaults else None) or entry.h1 or brand.site_name
    twitter_card = (twitter_defaults.card if twitter_defaults else None) or "summary_large_image"

    favicon = full_url(brand.site_url, brand.favicon_url or DEFAULT_FAVICON) or DEFAULT_FAVICON
    theme_color = brand.theme_color if isinstance(brand.theme_color, str) and brand.theme_color else None

    keywords = list(entry.keywords) or (list(defaults.keywords) if defaults and defaults.keywords else None)

    return SeoMetadataDTO(
        metadata_base=brand.site_url or None,
        title=title,
        description=description,
        keywords=keywords,
        alternates=AlternatesDTO(canonical=canonical_url),
        icons=IconsDTO(icon=favicon),
        theme_color=theme_color,
        open_graph=OpenGraphDTO(
            type=og_type,
            site_name=brand.site_name,
            title=og_title,
            description=og_description,
            url=canonical_url,
            images=[OgImageDTO(url=og_image, alt=og_alt)] if og_image else [],
            locale=brand.locale,
        ),
        twitter=TwitterDTO(
            card=twitter_card,
            title=og_title,
            description=og_description,
            images=[og_image] if og_image else [],
        ),
        robots=SeoRobotsDTO(index=robots.index, follow=robots.follow),
        json_ld=entry.json_ld,
    )


# ============================================================
# Resolver
# ============================================================

class SeoResolver:
    """
    Resolves page-level SEO for every public route.

    Args:
        provider: Layered configuration provider
        match_builder: Match page builder
        league_builder: League page builder
        player_builder: Player page builder
        page_repository: Source of admin page rows; None disables page overrides
    """

    def __init__(
        self,
        provider: SeoConfigProvider,
        match_builder: MatchSeoService,
        league_builder: LeagueSeoService,
        player_builder: PlayerSeoService,
        page_repository: Optional[SeoSettingsRepository] = None,
    ):
        self.provider = provider
        self.match_builder = match_builder
        self.league_builder = league_builder
        self.player_builder = player_builder
        self.page_repository = page_repository

    def _finalize(self, store: SeoStore, entry: SeoEntry, canonical_path: str) -> ResolvedSeo:
        canonical_path = ensure_trailing_slash(canonical_path) or "/"
        entry = clamp_entry(replace(entry, canonical=canonical_path))
        return ResolvedSeo(
            entry=entry,
            metadata=to_metadata(store, entry, canonical_path),
            canonical_path=canonical_path,
        )

    # ------------------------------------------------------------------
    # Home & static pages
    # ------------------------------------------------------------------

    async def resolve_home(self) -> ResolvedSeo:
        store = await self.provider.get_async_snapshot()
        entry = SeoEntry.from_mapping(_patch_fields(store.home))
        return self._finalize(store, entry, "/")

    async def resolve_root(self) -> SeoMetadataDTO:
        """Home metadata only (site-wide fallback)."""
        return (await self.resolve_home()).metadata

    async def _read_page_override(self, slug: str) -> dict:
        if self.page_repository is None or self.provider.settings.edge_runtime:
            return {}

        slugs = page_slug_candidates(slug)
        loop = asyncio.get_running_loop()
        try:
            record = await loop.run_in_executor(None, self.page_repository.find_page_override, slugs)
        except Exception as e:
            logger.error(f"Failed to read SEO page override for '{slug}': {e}", exc_info=True)
            return {}
        if record is None:
            return {}

        seo = extract_seo_from_unknown(record.data)
        if not seo:
            return {}
        try:
            patch = SeoEntryPatch.model_validate(seo)
        except ValidationError as e:
            logger.warning(f"Ignoring SEO page override '{record.key}': {e.error_count()} validation error(s)")
            return {}

        fields = patch.as_entry_fields()
        return {name: fields[name] for name in PAGE_OVERRIDE_FIELDS if name in fields}

    async def resolve_static_page(self, page_key: str, pathname: Optional[str] = None) -> ResolvedSeo:
        """
        Resolve a static page (contact, privacy policy, terms of service).

        The entry is layered as store page, then store override, then the
        admin page row from the database.
        """
        store = await self.provider.get_async_snapshot()
        key = STATIC_PAGE_KEY_ALIASES.get(page_key, page_key)

        base = store.pages.get(key) or store.pages.get(page_key)
        if base is None:
            for dashed, camel in STATIC_PAGE_KEY_ALIASES.items():
                if camel == key and dashed in store.pages:
                    base = store.pages[dashed]
                    break

        override = store.find_override(f"page:{key}", key, f"page:{page_key}", page_key)
        db_override = await self._read_page_override(STATIC_PAGE_DB_SLUGS.get(key, page_key))

        entry = SeoEntry.from_mapping(
            _patch_fields(base),
            title=store.brand.site_name,
            description=store.brand.default_meta_description,
            h1=store.brand.site_name,
        )
        entry = entry.with_patch(_patch_fields(override)).with_patch(db_override)

        default_path = STATIC_PAGE_PATHS.get(key) or f"/{normalize_slug(page_key)}/"
        return self._finalize(store, entry, pathname or default_path)

    # ------------------------------------------------------------------
    # Sports pages
    # ------------------------------------------------------------------

    async def resolve_sports_tab(
        self,
        sport: str,
        tab: str = DEFAULT_SPORTS_TAB,
        pathname: Optional[str] = None,
    ) -> ResolvedSeo:
        store = await self.provider.get_async_snapshot()
        brand = store.brand

        sport = normalize_sport(sport)
        tab = (tab or DEFAULT_SPORTS_TAB).lower()

        sport_name = store.sport_label(sport)
        tab_label = store.labels.sports_tab_labels.get(tab) or tab

        entry = SeoEntry(
            title=f"Live {sport_name} Scores – {tab_label} | {brand.site_name}",
            description=(
                f"See {tab_label.lower()} {sport_name.lower()} scores with match stats, lineups, "
                f"results and fixtures. Fast updates on {brand.site_name}."
            ),
            h1=f"{sport_name} {tab_label}",
            og_image=brand.default_og_image,
        )
        entry = entry.with_patch(_patch_fields(store.find_override(f"sportsTab:{sport}:{tab}")))

        return self._finalize(store, entry, pathname or f"/sports/{sport}/{tab}/")

    async def resolve_league(
        self,
        sport: str,
        tab: str,
        league_id: str,
        pathname: Optional[str] = None,
    ) -> ResolvedSeo:
        store = await self.provider.get_async_snapshot()

        sport = normalize_sport(sport)
        tab = (tab or DEFAULT_SPORTS_TAB).lower()
        league_id = str(league_id)

        entry = await self.league_builder.build(store, sport, league_id, tab)
        entry = entry.with_patch(_patch_fields(store.find_override(f"sportsLeague:{sport}:{tab}:{league_id}")))

        return self._finalize(store, entry, pathname or f"/sports/{sport}/{tab}/league/{league_id}/")

    async def resolve_league_page(
        self,
        sport: str,
        league_id_or_slug: str,
        tab: Optional[str] = None,
        pathname: Optional[str] = None,
    ) -> ResolvedSeo:
        """
        Resolve a league landing page addressed by slug (``/football/bundesliga/``).

        The slug is kept in the canonical even when the provider resolves it
        to a numeric id. A tab page (``/football/bundesliga/results/``) keeps
        its tab segment.
        """
        store = await self.provider.get_async_snapshot()

        sport = normalize_sport(sport)
        slug = normalize_slug(league_id_or_slug)
        clean_tab = tab.lower() if tab else None

        entry = await self.league_builder.build(store, sport, slug, clean_tab)

        default_path = f"/{sport}/{slug}/{clean_tab}/" if clean_tab else f"/{sport}/{slug}/"
        return self._finalize(store, entry, pathname or default_path)

    async def resolve_match(
        self,
        sport: str,
        match_id: str,
        tab: str = DEFAULT_MATCH_TAB,
        pathname: Optional[str] = None,
    ) -> ResolvedSeo:
        store = await self.provider.get_async_snapshot()

        sport = normalize_sport(sport)
        tab = (tab or DEFAULT_MATCH_TAB).lower()
        match_id = str(match_id)

        entry = await self.match_builder.build(store, sport, match_id, tab)
        return self._finalize(store, entry, pathname or f"/match/{sport}/{match_id}/{tab}/")

    async def resolve_player(
        self,
        sport: str,
        player_id: str,
        pathname: Optional[str] = None,
    ) -> ResolvedSeo:
        store = await self.provider.get_async_snapshot()

        sport = normalize_sport(sport)
        player_id = str(player_id)

        entry = await self.player_builder.build(store, sport, player_id)
        return self._finalize(store, entry, pathname or f"/player/{sport}/{player_id}/")
