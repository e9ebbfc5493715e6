"""
League SEO Service Module

Domain service for league pages under a sports tab. Leagues may be addressed
by numeric provider id or by slug; when the provider resolves a slug, the
numeric id is used for the canonical and the override keys.
"""

import logging
from typing import Optional

from livescore_seo.domain.constants import DEFAULT_SPORTS_TAB
from livescore_seo.domain.entities.entities import LeagueData, SeoEntry
from livescore_seo.domain.entities.seo_store import SeoStore
from livescore_seo.domain.repositories.repositories import EntityDataSource
from livescore_seo.utils.seo_utils import (
    ensure_trailing_slash,
    fill_template,
    full_url,
    normalize_sport,
    normalize_whitespace,
    pick_pattern_index,
    prune_none,
    tidy_filled_template,
    unique_non_empty,
)

logger = logging.getLogger(__name__)


DEFAULT_TITLE_PATTERN = "{name} – Live Scores & Standings | {brand}"


def clean_slug(slug: Optional[str]) -> str:
    """Turn "premier-league" into "premier league"."""
    return normalize_whitespace((slug or "").replace("-", " "))


def league_canonical_path(sport: str, league_id: str, tab: Optional[str] = None) -> str:
    clean_tab = (tab or DEFAULT_SPORTS_TAB).lower()
    return ensure_trailing_slash(f"/sports/{sport}/{clean_tab}/league/{league_id}")


class LeagueSeoService:
    """Builds SEO entries for league pages."""

    def __init__(self, data_source: EntityDataSource):
        self.data_source = data_source

    async def build(
        self,
        store: SeoStore,
        sport: str,
        league_id: str,
        tab: Optional[str] = None,
    ) -> SeoEntry:
        """
        Build the entry for one league under a sports tab.

        Args:
            store: Merged SEO store snapshot
            sport: Sport key (aliases accepted)
            league_id: Numeric provider id or slug
            tab: Sports tab (defaults to "all")
        """
        sport = normalize_sport(sport)
        league_id = str(league_id)
        clean_tab = (tab or DEFAULT_SPORTS_TAB).lower()
        templates = store.league
        brand = store.brand

        data = await self._fetch(sport, league_id, templates.api_timeout_ms)

        resolved_id = data.id if data and data.id else league_id
        name = (data.name if data and data.name else None) or clean_slug(league_id) or "League"
        country = (data.country if data and data.country else None) or "World"
        season = data.season if data and data.season else ""

        title_patterns = templates.title_patterns or [DEFAULT_TITLE_PATTERN]
        raw_title = title_patterns[pick_pattern_index(resolved_id, len(title_patterns))] or title_patterns[0]

        sport_label = store.sport_label(sport)
        values = {
            "name": name,
            "country": country,
            "season": season,
            "brand": brand.site_name,
            "sport": sport_label,
        }
        title = tidy_filled_template(fill_template(raw_title, values))
        description = tidy_filled_template(fill_template(templates.description_pattern, values))
        h1 = tidy_filled_template(fill_template(templates.h1_pattern, values))

        canonical = league_canonical_path(sport, resolved_id, clean_tab)
        logo = data.logo if data else None

        keywords = unique_non_empty([
            name,
            country,
            f"{name} {season}" if season else "",
            f"{name} standings",
            f"{name} table",
            f"{name} fixtures",
            f"{name} results",
            f"{name} live scores",
        ])

        json_ld = None
        if templates.structured_data.enabled:
            json_ld = prune_none({
                "@context": "https://schema.org",
                "@type": "SportsOrganization",
                "name": name,
                "url": full_url(brand.site_url, canonical),
                "logo": full_url(brand.site_url, logo) if logo else None,
                "location": {"@type": "Place", "name": country},
                "sport": sport_label,
                "description": description,
            })

        entry = SeoEntry(
            title=title,
            description=description,
            h1=h1,
            canonical=canonical,
            og_image=logo or templates.og.fallback_image,
            keywords=keywords,
            json_ld=json_ld,
        )

        override = store.find_override(
            f"league:{sport}:{resolved_id}:{clean_tab}",
            f"league:{sport}:{resolved_id}",
        )
        if override is not None:
            entry = entry.with_patch(override.as_entry_fields())
        return entry

    async def _fetch(self, sport: str, league_id: str, timeout_ms: int) -> Optional[LeagueData]:
        try:
            return await self.data_source.fetch_league(sport, league_id, timeout_ms=timeout_ms)
        except Exception as e:
            logger.warning(f"League lookup failed for {sport}/{league_id}: {e}")
            return None
