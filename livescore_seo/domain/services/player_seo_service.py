"""
Player SEO Service Module

Domain service for player profile pages.
"""

import logging
from typing import Optional

from livescore_seo.domain.entities.entities import PlayerData, SeoEntry
from livescore_seo.domain.entities.seo_store import SeoStore
from livescore_seo.domain.repositories.repositories import EntityDataSource
from livescore_seo.utils.seo_utils import (
    fill_template,
    full_url,
    normalize_sport,
    pick_pattern_index,
    prune_none,
    tidy_filled_template,
    unique_non_empty,
)

logger = logging.getLogger(__name__)


DEFAULT_TITLE_PATTERN = "{name} – Player Profile | {brand}"


def player_canonical_path(sport: str, player_id: str) -> str:
    return f"/player/{sport}/{player_id}/"


class PlayerSeoService:
    """Builds SEO entries for player pages."""

    def __init__(self, data_source: EntityDataSource):
        self.data_source = data_source

    async def build(self, store: SeoStore, sport: str, player_id: str) -> SeoEntry:
        """
        Build the entry for one player.

        Without provider data the page is titled "Player Profile" and the team
        placeholders collapse away.
        """
        sport = normalize_sport(sport)
        player_id = str(player_id)
        templates = store.player
        brand = store.brand

        data = await self._fetch(sport, player_id, templates.api_timeout_ms)

        name = data.name if data and data.name else "Player Profile"
        team = data.team_name if data and data.team_name else ""

        title_patterns = templates.title_patterns or [DEFAULT_TITLE_PATTERN]
        raw_title = title_patterns[pick_pattern_index(player_id, len(title_patterns))] or title_patterns[0]

        sport_label = store.sport_label(sport)
        values = {
            "name": name,
            "team": team,
            "brand": brand.site_name,
            "sport": sport_label,
        }
        title = tidy_filled_template(fill_template(raw_title, values))
        description = tidy_filled_template(fill_template(templates.description_pattern, values))
        h1 = tidy_filled_template(fill_template(templates.h1_pattern, values))

        canonical = player_canonical_path(sport, player_id)

        keywords = unique_non_empty([
            name,
            f"{name} profile",
            f"{name} stats",
            f"{name} {sport_label}",
            f"{name} {team}" if team else "",
            f"{team} player" if team else "",
            "player profile",
            "player stats",
        ])

        # Photo, then template fallback, then brand default (always absolute)
        og_image = (
            full_url(brand.site_url, data.photo if data else None)
            or full_url(brand.site_url, templates.og.fallback_image)
            or full_url(brand.site_url, brand.default_og_image)
        )

        json_ld = None
        if templates.structured_data.enabled:
            nationality = data.nationality if data else None
            json_ld = prune_none({
                "@context": "https://schema.org",
                "@type": "Athlete",
                "name": name,
                "url": full_url(brand.site_url, canonical),
                "nationality": {"@type": "Country", "name": nationality} if nationality else None,
                "affiliation": {"@type": "SportsTeam", "name": team} if team else None,
                "image": og_image,
                "description": description,
            })

        entry = SeoEntry(
            title=title,
            description=description,
            h1=h1,
            canonical=canonical,
            og_image=og_image,
            keywords=keywords,
            json_ld=json_ld,
        )

        override = store.find_override(f"player:{sport}:{player_id}")
        if override is not None:
            entry = entry.with_patch(override.as_entry_fields())
        return entry

    async def _fetch(self, sport: str, player_id: str, timeout_ms: int) -> Optional[PlayerData]:
        try:
            return await self.data_source.fetch_player(sport, player_id, timeout_ms=timeout_ms)
        except Exception as e:
            logger.warning(f"Player lookup failed for {sport}/{player_id}: {e}")
            return None
