"""
Unit Tests for the Match, League and Player SEO Builders
"""

import asyncio

import pytest

from livescore_seo.domain.constants import (
    EVENT_STATUS_CANCELLED,
    EVENT_STATUS_POSTPONED,
    EVENT_STATUS_SCHEDULED,
)
from livescore_seo.domain.entities.entities import LeagueData, MatchData, PlayerData, SeoRobots
from livescore_seo.domain.entities.seo_store import SeoStore
from livescore_seo.domain.services.league_seo_service import LeagueSeoService, clean_slug
from livescore_seo.domain.services.match_seo_service import MatchSeoService, map_event_status
from livescore_seo.domain.services.player_seo_service import PlayerSeoService

from tests.conftest import FakeDataSource


ARSENAL_CHELSEA = MatchData(
    sport="football",
    id="1035037",
    home_name="Arsenal",
    away_name="Chelsea",
    home_logo="https://media.api-sports.io/football/teams/42.png",
    away_logo=None,
    home_score=2,
    away_score=1,
    date_iso="2024-05-01T19:00:00+00:00",
    status_short="PST",
)


@pytest.fixture
def store():
    return SeoStore()


def store_with(**data) -> SeoStore:
    return SeoStore.model_validate(data)


class TestEventStatus:
    """Tests for the schema.org event status mapping."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            ("PST", EVENT_STATUS_POSTPONED),
            ("Postponed", EVENT_STATUS_POSTPONED),
            ("CANC", EVENT_STATUS_CANCELLED),
            ("ABD", EVENT_STATUS_CANCELLED),
            ("Cancelled", EVENT_STATUS_CANCELLED),
            ("FT", EVENT_STATUS_SCHEDULED),
            ("1H", EVENT_STATUS_SCHEDULED),
            (None, EVENT_STATUS_SCHEDULED),
        ],
    )
    def test_map_event_status(self, status, expected):
        assert map_event_status(status) == expected


class TestMatchSeoService:
    """Tests for match entries."""

    def test_builds_from_fetched_match(self, store):
        source = FakeDataSource(matches={"1035037": ARSENAL_CHELSEA})
        entry = asyncio.run(MatchSeoService(source).build(store, "soccer", "1035037", "Lineups"))

        # ord("1") % 3 == 1
        assert entry.title == "MATCH: Arsenal vs Chelsea – Score & Lineups"
        assert entry.h1 == "MATCH: Arsenal vs Chelsea – Live Score"
        assert "Fast updates on Live Score." in entry.description
        assert entry.canonical == "/match/football/1035037/lineups/"
        assert entry.og_image == "/og/match/football/1035037"
        assert entry.keywords == (
            "Arsenal vs Chelsea",
            "Arsenal vs Chelsea live score",
            "Arsenal vs Chelsea result",
            "Arsenal vs Chelsea stats",
            "live score",
        )
        assert source.calls == [("match", "football", "1035037", 650)]

    def test_json_ld(self, store):
        source = FakeDataSource(matches={"1035037": ARSENAL_CHELSEA})
        entry = asyncio.run(MatchSeoService(source).build(store, "football", "1035037"))
        ld = entry.json_ld

        assert ld["@type"] == "SportsEvent"
        assert ld["name"] == "Arsenal vs Chelsea"
        assert ld["url"] == "https://livesoccerr.com/match/football/1035037/summary/"
        assert ld["eventStatus"] == EVENT_STATUS_POSTPONED
        assert ld["startDate"] == "2024-05-01T19:00:00+00:00"
        assert ld["description"].startswith("Live score: Arsenal 2 - 1 Chelsea. ")
        assert ld["homeTeam"]["logo"] == "https://media.api-sports.io/football/teams/42.png"
        assert "logo" not in ld["awayTeam"]
        assert [c["name"] for c in ld["competitor"]] == ["Arsenal", "Chelsea"]
        assert ld["image"] == ["https://livesoccerr.com/og/match/football/1035037"]
        assert ld["organizer"]["name"] == "Live Score"

    def test_fallbacks_without_data(self, store):
        entry = asyncio.run(MatchSeoService(FakeDataSource()).build(store, "", "99"))
        assert "Home vs Away" in entry.title
        assert entry.canonical == "/match/football/99/summary/"
        assert "startDate" not in entry.json_ld
        assert entry.json_ld["eventStatus"] == EVENT_STATUS_SCHEDULED

    def test_source_exception_degrades(self, store):
        source = FakeDataSource(error=RuntimeError("boom"))
        entry = asyncio.run(MatchSeoService(source).build(store, "football", "5"))
        assert "Home vs Away" in entry.title

    def test_pattern_selection_is_deterministic(self, store):
        service = MatchSeoService(FakeDataSource())
        first = asyncio.run(service.build(store, "football", "2001"))
        second = asyncio.run(service.build(store, "football", "2999"))
        # ord("2") % 3 == 2
        assert first.title == second.title == "Home vs Away Live Score"

    def test_empty_patterns_use_builtin(self):
        store = store_with(match={"titlePatterns": []})
        entry = asyncio.run(MatchSeoService(FakeDataSource()).build(store, "football", "1"))
        assert entry.title == "Home vs Away | Live Score"

    def test_static_og_image_when_banner_disabled(self):
        store = store_with(match={"og": {"useDynamicBanner": False, "fallbackImage": "/og/match.png"}})
        entry = asyncio.run(MatchSeoService(FakeDataSource()).build(store, "football", "1"))
        assert entry.og_image == "/og/match.png"

    def test_schema_disabled(self):
        store = store_with(match={"schema": {"enabled": False}})
        entry = asyncio.run(MatchSeoService(FakeDataSource()).build(store, "football", "1"))
        assert entry.json_ld is None

    def test_tab_override_beats_match_override(self):
        store = store_with(overrides={
            "match:football:7:summary": {"title": "Tab title"},
            "match:football:7": {"title": "Match title", "robots": {"index": False}},
        })
        entry = asyncio.run(MatchSeoService(FakeDataSource()).build(store, "football", "7"))
        assert entry.title == "Tab title"
        assert entry.robots is None

        entry = asyncio.run(MatchSeoService(FakeDataSource()).build(store, "football", "7", "stats"))
        assert entry.title == "Match title"
        assert entry.robots == SeoRobots(index=False, follow=True)


class TestLeagueSeoService:
    """Tests for league entries."""

    def test_builds_from_fetched_league(self, store):
        source = FakeDataSource(leagues={"39": LeagueData(id="39", name="Premier League", country="England", season="2024")})
        entry = asyncio.run(LeagueSeoService(source).build(store, "football", "39"))

        # ord("3") % 2 == 1
        assert entry.title == "Premier League 2024 Table & Results – Live Score"
        assert entry.h1 == "Premier League – Live Scores & Standings"
        assert entry.canonical == "/sports/football/all/league/39/"
        assert "Premier League 2024" in entry.keywords
        assert entry.json_ld["@type"] == "SportsOrganization"
        assert entry.json_ld["location"] == {"@type": "Place", "name": "England"}
        assert source.calls == [("league", "football", "39", 2000)]

    def test_slug_resolved_to_numeric_id(self, store):
        source = FakeDataSource(leagues={"la-liga": LeagueData(id="140", name="La Liga", country="Spain")})
        entry = asyncio.run(LeagueSeoService(source).build(store, "football", "la-liga", "live"))
        assert entry.canonical == "/sports/football/live/league/140/"

    def test_fallbacks_without_data(self, store):
        entry = asyncio.run(LeagueSeoService(FakeDataSource()).build(store, "football", "serie-a"))
        assert entry.h1 == "serie a – Live Scores & Standings"
        assert "World" in entry.keywords
        # Empty season placeholders collapse
        assert "  " not in entry.description
        assert "()" not in entry.description
        assert entry.og_image == "/og.png"

    def test_clean_slug(self):
        assert clean_slug("premier-league") == "premier league"
        assert clean_slug("") == ""

    def test_league_override(self):
        store = store_with(overrides={"league:football:39": {"description": "Custom"}})
        source = FakeDataSource(leagues={"39": LeagueData(id="39", name="Premier League", country="England")})
        entry = asyncio.run(LeagueSeoService(source).build(store, "football", "39"))
        assert entry.description == "Custom"


class TestPlayerSeoService:
    """Tests for player entries."""

    def test_builds_from_fetched_player(self, store):
        source = FakeDataSource(players={
            "1460": PlayerData(name="B. Saka", team_name="Arsenal", photo="https://media.api-sports.io/p/1460.png", nationality="England"),
        })
        entry = asyncio.run(PlayerSeoService(source).build(store, "soccer", "1460"))

        # ord("1") % 3 == 1
        assert entry.title == "B. Saka Stats – Arsenal Player Profile"
        assert entry.canonical == "/player/football/1460/"
        assert entry.og_image == "https://media.api-sports.io/p/1460.png"
        assert "Arsenal player" in entry.keywords
        assert entry.json_ld["nationality"] == {"@type": "Country", "name": "England"}
        assert entry.json_ld["affiliation"] == {"@type": "SportsTeam", "name": "Arsenal"}

    def test_fallbacks_without_data(self, store):
        entry = asyncio.run(PlayerSeoService(FakeDataSource()).build(store, "basketball", "0"))
        # ord("0") % 3 == 0
        assert entry.title == "Player Profile – Profile, Stats & News"
        assert entry.og_image == "https://livesoccerr.com/og.png"
        assert "affiliation" not in entry.json_ld
        assert "nationality" not in entry.json_ld
        assert all("player" != k for k in entry.keywords)

    def test_player_override(self):
        store = store_with(overrides={"player:football:10": {"h1": "The Captain"}})
        entry = asyncio.run(PlayerSeoService(FakeDataSource()).build(store, "football", "10"))
        assert entry.h1 == "The Captain"
