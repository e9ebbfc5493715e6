"""
Shared fixtures for the SEO test suite.
"""

import os
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pytest

from livescore_seo.domain.entities.entities import LeagueData, MatchData, PlayerData
from livescore_seo.domain.repositories.repositories import (
    EntityDataSource,
    SeoSettingsRecord,
    SeoSettingsRepository,
)
from livescore_seo.infrastructure.config.settings import SeoStoreSettings


ENV_PREFIXES = ("SEO_", "API_SPORTS", "API_FOOTBALL", "CDN_", "SITE_URL", "DATABASE_URL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without SEO/provider variables from the host environment."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class FakeDataSource(EntityDataSource):
    """Entity source returning canned data and recording calls."""

    def __init__(self, matches=None, leagues=None, players=None, error: Optional[Exception] = None):
        self.matches: Dict[str, MatchData] = matches or {}
        self.leagues: Dict[str, LeagueData] = leagues or {}
        self.players: Dict[str, PlayerData] = players or {}
        self.error = error
        self.calls: List[tuple] = []

    async def fetch_match(self, sport, match_id, timeout_ms=None):
        self.calls.append(("match", sport, match_id, timeout_ms))
        if self.error:
            raise self.error
        return self.matches.get(match_id)

    async def fetch_league(self, sport, league_id, timeout_ms=None):
        self.calls.append(("league", sport, league_id, timeout_ms))
        if self.error:
            raise self.error
        return self.leagues.get(league_id)

    async def fetch_player(self, sport, player_id, timeout_ms=None):
        self.calls.append(("player", sport, player_id, timeout_ms))
        if self.error:
            raise self.error
        return self.players.get(player_id)


@pytest.fixture
def data_source():
    return FakeDataSource()


class InMemorySettingsRepository(SeoSettingsRepository):
    """Dict-backed settings repository."""

    def __init__(self):
        self.records: Dict[str, Dict[str, SeoSettingsRecord]] = {kind: {} for kind in self.RECORD_KINDS}
        self.pages: Dict[str, SeoSettingsRecord] = {}
        self.fail = False
        self.record_calls = 0
        self.page_calls = 0

    def put(self, kind: str, key: str, data, updated_at: Optional[datetime] = None):
        self.records[kind][key] = SeoSettingsRecord(key=key, data=data, updated_at=updated_at or datetime(2024, 1, 1))

    def put_page(self, slug: str, data, updated_at: Optional[datetime] = None):
        self.pages[slug] = SeoSettingsRecord(key=slug, data=data, updated_at=updated_at or datetime(2024, 1, 1))

    def find_first_by_keys(self, kind: str, keys: Sequence[str]):
        self.record_calls += 1
        if self.fail:
            raise RuntimeError("database unavailable")
        for key in keys:
            if key in self.records[kind]:
                return self.records[kind][key]
        return None

    def find_page_override(self, slugs: Sequence[str]):
        self.page_calls += 1
        if self.fail:
            raise RuntimeError("database unavailable")
        rows = [self.pages[s] for s in slugs if s in self.pages]
        if not rows:
            return None
        return max(rows, key=lambda r: r.updated_at)


@pytest.fixture
def repository():
    return InMemorySettingsRepository()


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in an empty temporary directory."""
    return SeoStoreSettings(cwd=str(tmp_path))
