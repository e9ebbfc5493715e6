"""
Match SEO Service Module

Domain service that turns a match id into a page-level SEO entry using the
match templates from the store and, when the provider answers in time, the
real fixture (teams, logos, kick-off, score).
"""

import logging
from typing import Optional

from livescore_seo.domain.constants import (
    CANCELLED_STATUS_CODES,
    DEFAULT_MATCH_TAB,
    EVENT_STATUS_CANCELLED,
    EVENT_STATUS_POSTPONED,
    EVENT_STATUS_SCHEDULED,
    POSTPONED_STATUS_CODES,
)
from livescore_seo.domain.entities.entities import MatchData, SeoEntry
from livescore_seo.domain.entities.seo_store import SeoStore
from livescore_seo.domain.repositories.repositories import EntityDataSource
from livescore_seo.utils.seo_utils import (
    ensure_trailing_slash,
    fill_template,
    full_url,
    normalize_sport,
    pick_pattern_index,
    prune_none,
    unique_non_empty,
)

logger = logging.getLogger(__name__)


DEFAULT_TITLE_PATTERN = "{home} vs {away} | {brand}"
DEFAULT_TAB_LABEL = "Live Score"


def map_event_status(status_short: Optional[str]) -> str:
    """
    Map a provider short status to a schema.org EventStatusType.

    Live and finished games stay "scheduled"; schema.org has no value for them.
    """
    if status_short in POSTPONED_STATUS_CODES:
        return EVENT_STATUS_POSTPONED
    if status_short in CANCELLED_STATUS_CODES:
        return EVENT_STATUS_CANCELLED
    return EVENT_STATUS_SCHEDULED


def match_canonical_path(sport: str, match_id: str, tab: Optional[str] = None) -> str:
    clean_tab = (tab or DEFAULT_MATCH_TAB).lower()
    return ensure_trailing_slash(f"/match/{sport}/{match_id}/{clean_tab}")


class MatchSeoService:
    """
    Builds SEO entries for match pages.

    Never raises because of the data source: a missing fixture falls back to
    "Home" vs "Away".
    """

    def __init__(self, data_source: EntityDataSource):
        self.data_source = data_source

    async def build(
        self,
        store: SeoStore,
        sport: str,
        match_id: str,
        tab: Optional[str] = None,
    ) -> SeoEntry:
        """
        Build the entry for one match tab.

        Args:
            store: Merged SEO store snapshot
            sport: Sport key as found in the route (aliases accepted)
            match_id: Provider match id
            tab: Match tab (defaults to "summary")

        Returns:
            Entry with any ``match:`` override applied
        """
        sport = normalize_sport(sport)
        match_id = str(match_id)
        clean_tab = (tab or DEFAULT_MATCH_TAB).lower()
        templates = store.match
        brand = store.brand

        data = await self._fetch(sport, match_id, templates.api_timeout_ms)

        home = data.home_name if data and data.home_name else "Home"
        away = data.away_name if data and data.away_name else "Away"
        match_title = f"{home} vs {away}"

        title_patterns = templates.title_patterns or [DEFAULT_TITLE_PATTERN]
        raw_title = title_patterns[pick_pattern_index(match_id, len(title_patterns))] or title_patterns[0]

        sport_label = store.sport_label(sport)
        values = {
            "home": home,
            "away": away,
            "brand": brand.site_name,
            "sport": sport_label,
            "tab": store.labels.match_tab_labels.get(clean_tab) or DEFAULT_TAB_LABEL,
        }
        title = fill_template(raw_title, values)
        description = fill_template(templates.description_pattern, values)
        h1 = fill_template(templates.h1_pattern, values)

        canonical = match_canonical_path(sport, match_id, clean_tab)

        og = templates.og
        if og.use_dynamic_banner and og.banner_path:
            og_image = og.banner_path.replace("{sport}", sport).replace("{id}", match_id)
        else:
            og_image = og.fallback_image

        keywords = unique_non_empty([
            match_title,
            f"{match_title} live score",
            f"{match_title} result",
            f"{match_title} stats",
            templates.primary_keyword or "live score",
        ])

        json_ld = None
        if templates.structured_data.enabled:
            json_ld = self._build_json_ld(
                store, data, home, away, sport_label, description, canonical, og_image,
            )

        entry = SeoEntry(
            title=title,
            description=description,
            h1=h1,
            canonical=canonical,
            og_image=og_image,
            keywords=keywords,
            json_ld=json_ld,
        )

        override = store.find_override(
            f"match:{sport}:{match_id}:{clean_tab}",
            f"match:{sport}:{match_id}",
        )
        if override is not None:
            entry = entry.with_patch(override.as_entry_fields())
        return entry

    async def _fetch(self, sport: str, match_id: str, timeout_ms: int) -> Optional[MatchData]:
        try:
            return await self.data_source.fetch_match(sport, match_id, timeout_ms=timeout_ms)
        except Exception as e:
            logger.warning(f"Match lookup failed for {sport}/{match_id}: {e}")
            return None

    @staticmethod
    def _build_json_ld(
        store: SeoStore,
        data: Optional[MatchData],
        home: str,
        away: str,
        sport_label: str,
        description: str,
        canonical: str,
        og_image: Optional[str],
    ) -> dict:
        brand = store.brand
        site_url = brand.site_url

        score_line = ""
        if data is not None and data.score_text:
            score_line = f"{home} {data.score_text} {away}"

        home_logo = full_url(site_url, data.home_logo) if data and data.home_logo else None
        away_logo = full_url(site_url, data.away_logo) if data and data.away_logo else None
        home_team = {"@type": "SportsTeam", "name": home, "logo": home_logo}
        away_team = {"@type": "SportsTeam", "name": away, "logo": away_logo}
        image = full_url(site_url, og_image)

        return prune_none({
            "@context": "https://schema.org",
            "@type": "SportsEvent",
            "name": f"{home} vs {away}",
            "url": full_url(site_url, canonical),
            "startDate": data.date_iso if data else None,
            "eventStatus": map_event_status(data.status_short if data else None),
            "description": f"Live score: {score_line}. {description}" if score_line else description,
            "sport": sport_label,
            "competitor": [dict(home_team), dict(away_team)],
            "homeTeam": home_team,
            "awayTeam": away_team,
            "image": [image] if image else None,
            "organizer": {
                "@type": "Organization",
                "name": brand.site_name,
                "url": site_url,
                "logo": full_url(site_url, brand.default_og_image),
            },
        })
