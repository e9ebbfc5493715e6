"""
API-Sports Data Source

This module fetches single matches, leagues and players from the API-Sports
family of per-sport APIs (api-sports.io) for SEO enrichment.

Each lookup prefers a zero-auth CDN mirror when one is configured for the
sport and falls back to the authenticated API. Every attempt is bounded by a
timeout and retried once with a slightly longer one, so the worst case per
source is roughly ``2 x timeout + increment``.

API Documentation: https://api-sports.io/documentation
"""

import os
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set, Tuple

import httpx

from livescore_seo.domain.constants import LIVE_STATUS_CODES
from livescore_seo.domain.entities.entities import LeagueData, MatchData, PlayerData
from livescore_seo.domain.repositories.repositories import EntityDataSource
from livescore_seo.utils.seo_utils import normalize_sport, unique_non_empty
from livescore_seo.utils.time_utils import get_current_time


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SportApi:
    """Provider host and match path for one sport."""
    host: str
    match_path: str
    cdn_env: str


# Provider endpoints per canonical sport key
SPORT_API: Dict[str, SportApi] = {
    "football": SportApi("v3.football.api-sports.io", "fixtures", "CDN_FOOTBALL_URL"),
    "basketball": SportApi("v1.basketball.api-sports.io", "games", "CDN_BASKETBALL_URL"),
    "baseball": SportApi("v1.baseball.api-sports.io", "games", "CDN_BASEBALL_URL"),
    "hockey": SportApi("v1.hockey.api-sports.io", "games", "CDN_HOCKEY_URL"),
    "nfl": SportApi("v1.american-football.api-sports.io", "games", "CDN_NFL_URL"),
    "rugby": SportApi("v1.rugby.api-sports.io", "games", "CDN_RUGBY_URL"),
    "volleyball": SportApi("v1.volleyball.api-sports.io", "games", "CDN_VOLLEYBALL_URL"),
}

LEAGUES_PATH = "leagues"
PLAYERS_PATH = "players"


@dataclass
class APISportsConfig:
    """
    Configuration for API-Sports.

    Attributes:
        api_key: Provider key (``API_SPORTS_KEY``, falling back to ``API_FOOTBALL_KEY``)
        cdn_urls: CDN base URL per sport (``CDN_<SPORT>_URL``)
        default_timeout_ms: Timeout used when a caller passes none
        match_min_timeout_ms: Floor for match lookups (CDN/API often need >1s)
        min_timeout_ms: Floor for league and player lookups
        max_timeout_ms: Hard cap for any attempt, retries included
        retry_increment_ms: Extra time granted to the single retry
    """
    api_key: Optional[str] = None
    cdn_urls: Dict[str, str] = field(default_factory=dict)
    default_timeout_ms: int = 1200
    match_min_timeout_ms: int = 2500
    min_timeout_ms: int = 250
    max_timeout_ms: int = 12000
    retry_increment_ms: int = 1500

    def __post_init__(self):
        # Try to get API key from environment if not provided
        if self.api_key is None:
            self.api_key = os.getenv("API_SPORTS_KEY") or os.getenv("API_FOOTBALL_KEY") or None
        for sport, api in SPORT_API.items():
            if sport not in self.cdn_urls:
                cdn = (os.getenv(api.cdn_env) or "").strip()
                if cdn:
                    self.cdn_urls[sport] = cdn


# ============================================================
# Response normalization
# ============================================================

def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _first_item(payload: Optional[dict]) -> Optional[dict]:
    if not isinstance(payload, dict):
        return None
    response = payload.get("response")
    if isinstance(response, list) and response and isinstance(response[0], dict):
        return response[0]
    if isinstance(response, dict) and response:
        return response
    return None


def _score_value(side: Any) -> Optional[int]:
    """A side's score is either a number or ``{"total": n}``."""
    if isinstance(side, dict):
        side = side.get("total")
    if side is None or isinstance(side, bool):
        return None
    try:
        return int(side)
    except (TypeError, ValueError):
        return None


def _date_value(value: Any) -> Optional[str]:
    """ISO date string, unwrapping ``{"date": ..., "time": ...}`` objects."""
    if isinstance(value, dict):
        day, time = value.get("date"), value.get("time")
        if day and time:
            return f"{day}T{time}"
        return day or None
    return value if isinstance(value, str) and value else None


def parse_match_item(sport: str, match_id: str, item: Optional[dict]) -> Optional[MatchData]:
    """
    Normalize one match from any of the known response dialects.

    Handles a ``fixture``/``game`` wrapper or a flat root, ``teams.home|local``
    and ``teams.away|visitors|visitor``, and ``goals|scores|score`` with
    either numeric sides or ``{"total": n}``.
    """
    if not isinstance(item, dict):
        return None

    core = _as_dict(item.get("fixture")) or _as_dict(item.get("game")) or item
    teams = _as_dict(item.get("teams")) or _as_dict(core.get("teams"))
    home = _as_dict(teams.get("home")) or _as_dict(teams.get("local"))
    away = (
        _as_dict(teams.get("away"))
        or _as_dict(teams.get("visitors"))
        or _as_dict(teams.get("visitor"))
    )

    scores = _as_dict(item.get("goals")) or _as_dict(item.get("scores")) or _as_dict(item.get("score"))
    home_score = _score_value(scores.get("home"))
    away_score = _score_value(scores.get("away"))
    if away_score is None:
        away_score = _score_value(scores.get("visitors"))

    league = _as_dict(item.get("league")) or _as_dict(core.get("league"))
    status = _as_dict(core.get("status")) or _as_dict(item.get("status"))
    status_short = status.get("short") or status.get("code")
    status_short = str(status_short) if status_short is not None else None

    country = league.get("country")
    if isinstance(country, dict):
        country = country.get("name")
    country = country or _as_dict(item.get("country")).get("name") or None

    return MatchData(
        sport=sport,
        id=str(match_id),
        home_name=home.get("name") or "Home",
        away_name=away.get("name") or "Away",
        home_logo=home.get("logo") or None,
        away_logo=away.get("logo") or None,
        home_score=home_score,
        away_score=away_score,
        date_iso=_date_value(core.get("date")) or _date_value(item.get("date")),
        status_short=status_short,
        league_name=league.get("name") or None,
        league_country=country,
        is_live=status_short in LIVE_STATUS_CODES,
    )


def parse_league_item(item: Optional[dict]) -> Optional[LeagueData]:
    """Normalize one league (``{league, country, seasons}`` or a flat league)."""
    if not isinstance(item, dict):
        return None

    league = _as_dict(item.get("league")) or item
    country = _as_dict(item.get("country")) or _as_dict(league.get("country"))

    league_id = league.get("id")
    if league_id is None or isinstance(league_id, bool):
        return None
    try:
        league_id = int(league_id)
    except (TypeError, ValueError):
        return None

    season = None
    seasons = item.get("seasons")
    if isinstance(seasons, list) and seasons:
        last = _as_dict(seasons[-1])
        season = last.get("year") or last.get("season")
    elif item.get("season") is not None:
        season = item.get("season")

    return LeagueData(
        id=str(league_id),
        name=league.get("name") or "League",
        country=country.get("name") or "World",
        logo=league.get("logo") or None,
        season=str(season) if season is not None else None,
    )


def parse_player_item(sport: str, item: Optional[dict]) -> Optional[PlayerData]:
    """Normalize one player; football nests under ``player``/``statistics``, other sports are flat."""
    if not isinstance(item, dict):
        return None

    if sport == "football":
        player = _as_dict(item.get("player"))
        statistics = item.get("statistics")
        first_stat = _as_dict(statistics[0]) if isinstance(statistics, list) and statistics else {}
        return PlayerData(
            name=player.get("name") or player.get("lastname") or "Player",
            team_name=_as_dict(first_stat.get("team")).get("name") or "",
            photo=player.get("photo") or None,
            nationality=player.get("nationality") or None,
        )

    full_name = f"{item.get('firstname') or ''} {item.get('lastname') or ''}".strip()
    country = item.get("country")
    if isinstance(country, dict):
        country = country.get("name")
    return PlayerData(
        name=(item.get("name") or full_name or "Player").strip(),
        team_name=_as_dict(item.get("team")).get("name") or "",
        photo=item.get("photo") or item.get("image") or None,
        nationality=country or item.get("nationality") or None,
    )


def season_candidates(sport: str, now: Optional[datetime] = None) -> List[str]:
    """
    Seasons to try, most likely first.

    Basketball seasons span two years and start around July; other sports
    are tried for the current year and the three before it.
    """
    now = now or get_current_time()
    year = now.year

    if sport == "basketball":
        start = year if now.month >= 7 else year - 1
        return unique_non_empty([
            f"{start}-{start + 1}",
            f"{start - 1}-{start}",
            f"{start - 2}-{start - 1}",
            f"{start + 1}-{start + 2}",
            str(year),
            str(year - 1),
        ])

    return unique_non_empty([str(year), str(year - 1), str(year - 2), str(year - 3)])


def _slug_to_query(slug: str) -> str:
    return slug.replace("-", " ").strip()


# ============================================================
# Client
# ============================================================

class APISportsSource(EntityDataSource):
    """
    Data source for API-Sports single-entity lookups.

    Never raises for provider problems: every failure path returns None so
    callers can fall back to generic SEO strings.
    """

    SOURCE_NAME = "API-Sports"

    def __init__(self, config: Optional[APISportsConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the data source.

        Args:
            config: Provider configuration (environment-backed by default)
            transport: Custom httpx transport (e.g. ``httpx.MockTransport`` in tests)
        """
        self.config = config or APISportsConfig()
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """Check if API key is configured."""
        return bool(self.config.api_key)

    def clamp_timeout_ms(self, timeout_ms: Optional[int], floor_ms: int) -> int:
        value = timeout_ms if isinstance(timeout_ms, (int, float)) and timeout_ms > 0 else self.config.default_timeout_ms
        return int(min(self.config.max_timeout_ms, max(floor_ms, value)))

    def retry_timeout_ms(self, timeout_ms: int) -> int:
        return min(self.config.max_timeout_ms, timeout_ms + self.config.retry_increment_ms)

    def _sources(self, sport: str, path: str) -> List[Tuple[str, str, Dict[str, str]]]:
        """``(label, url, headers)`` per source in preference order: CDN, then API."""
        api = SPORT_API.get(sport)
        if api is None:
            return []

        sources = []
        cdn = self.config.cdn_urls.get(sport)
        if cdn:
            sources.append(("cdn", f"{cdn.rstrip('/')}/{path}", {}))
        if self.is_configured:
            headers = {
                "x-apisports-key": self.config.api_key,
                "x-rapidapi-key": self.config.api_key,
                "x-rapidapi-host": api.host,
            }
            sources.append(("api", f"https://{api.host}/{path}", headers))
        return sources

    async def _make_request(
        self,
        url: str,
        params: Dict[str, str],
        headers: Dict[str, str],
        timeout_ms: int,
    ) -> Optional[dict]:
        """
        Make one bounded request.

        Returns:
            JSON response, or None on timeout, transport error, non-2xx or bad JSON
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=timeout_ms / 1000.0,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException:
            # Timeouts are expected under load; keep them out of error logs
            logger.debug(f"API-Sports request timed out after {timeout_ms}ms: {url}")
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(f"API-Sports HTTP error: {e.response.status_code} for {url}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"API-Sports request error for {url}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"API-Sports returned invalid JSON for {url}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        if data.get("errors"):
            logger.warning(f"API-Sports error payload for {url}: {data['errors']}")
            return None
        return data

    async def _request_with_retry(
        self,
        url: str,
        params: Dict[str, str],
        headers: Dict[str, str],
        timeout_ms: int,
    ) -> Optional[dict]:
        """One attempt, then exactly one retry with a longer (capped) timeout."""
        data = await self._make_request(url, params, headers, timeout_ms)
        if data is not None:
            return data
        return await self._make_request(url, params, headers, self.retry_timeout_ms(timeout_ms))

    async def _first_from_sources(
        self,
        sport: str,
        path: str,
        params: Dict[str, str],
        timeout_ms: int,
        failed: Optional[Set[str]] = None,
    ) -> Optional[dict]:
        """
        First non-empty ``response`` item across sources (CDN first).

        Args:
            failed: Labels of sources that stopped answering; they are skipped,
                and a source that fails both attempts here is added
        """
        for label, url, headers in self._sources(sport, path):
            if failed is not None and label in failed:
                continue
            payload = await self._request_with_retry(url, params, headers, timeout_ms)
            if payload is None:
                if failed is not None:
                    failed.add(label)
                logger.debug(f"API-Sports {label} source unavailable for {path} {params}")
                continue
            item = _first_item(payload)
            if item is not None:
                return item
            logger.debug(f"API-Sports {label} source had no data for {path} {params}")
        return None

    async def fetch_match(self, sport: str, match_id: str, timeout_ms: Optional[int] = None) -> Optional[MatchData]:
        """
        Get one match by id.

        Args:
            sport: Sport key (aliases accepted)
            match_id: Provider match id
            timeout_ms: Per-attempt timeout before clamping

        Returns:
            Normalized match, or None
        """
        sport = normalize_sport(sport)
        api = SPORT_API.get(sport)
        if api is None:
            return None

        timeout = self.clamp_timeout_ms(timeout_ms, self.config.match_min_timeout_ms)
        item = await self._first_from_sources(sport, api.match_path, {"id": str(match_id)}, timeout)
        return parse_match_item(sport, match_id, item)

    async def _fetch_seasoned(
        self,
        sport: str,
        path: str,
        params: Dict[str, str],
        timeout_ms: int,
    ) -> Optional[dict]:
        """
        Try each plausible season until one yields data, then once without a season.

        A source that fails both attempts is not asked again for later seasons,
        and the loop ends once every source has failed. A dead provider costs
        one retried request per source, the same as a match lookup.
        """
        labels = {label for label, _url, _headers in self._sources(sport, path)}
        failed: Set[str] = set()
        for season in season_candidates(sport):
            item = await self._first_from_sources(sport, path, {**params, "season": season}, timeout_ms, failed)
            if item is not None:
                return item
            if labels <= failed:
                return None
        return await self._first_from_sources(sport, path, params, timeout_ms, failed)

    async def fetch_league(self, sport: str, league_id: str, timeout_ms: Optional[int] = None) -> Optional[LeagueData]:
        """
        Get one league by numeric id or by slug (searched by name).
        """
        sport = normalize_sport(sport)
        if sport not in SPORT_API:
            return None

        league_id = str(league_id or "").strip()
        if not league_id:
            return None
        params = {"id": league_id} if league_id.isdigit() else {"search": _slug_to_query(league_id)}

        timeout = self.clamp_timeout_ms(timeout_ms, self.config.min_timeout_ms)
        item = await self._fetch_seasoned(sport, LEAGUES_PATH, params, timeout)
        return parse_league_item(item)

    async def fetch_player(self, sport: str, player_id: str, timeout_ms: Optional[int] = None) -> Optional[PlayerData]:
        """
        Get one player by id.
        """
        sport = normalize_sport(sport)
        if sport not in SPORT_API:
            return None

        timeout = self.clamp_timeout_ms(timeout_ms, self.config.min_timeout_ms)
        item = await self._fetch_seasoned(sport, PLAYERS_PATH, {"id": str(player_id)}, timeout)
        return parse_player_item(sport, item)
