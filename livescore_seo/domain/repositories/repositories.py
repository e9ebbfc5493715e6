"""
Domain Repository Interfaces Module

These are abstract interfaces that define how the domain layer accesses data.
Concrete implementations are provided in the infrastructure layer.
This follows the Dependency Inversion Principle (DIP).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from livescore_seo.domain.entities.entities import LeagueData, MatchData, PlayerData


class EntityDataSource(ABC):
    """
    Abstract source of live sports entities.

    Implementations must never raise for provider problems: timeouts, HTTP
    errors and malformed payloads all surface as None.
    """

    @abstractmethod
    async def fetch_match(self, sport: str, match_id: str, timeout_ms: Optional[int] = None) -> Optional[MatchData]:
        """Get one match by provider id."""
        pass

    @abstractmethod
    async def fetch_league(self, sport: str, league_id: str, timeout_ms: Optional[int] = None) -> Optional[LeagueData]:
        """Get one league by provider id or slug."""
        pass

    @abstractmethod
    async def fetch_player(self, sport: str, player_id: str, timeout_ms: Optional[int] = None) -> Optional[PlayerData]:
        """Get one player by provider id."""
        pass


@dataclass(frozen=True)
class SeoSettingsRecord:
    """
    One keyed SEO settings row.

    Attributes:
        key: Record key (e.g. "livesoccerr_match")
        data: JSON partial of the store
        updated_at: Last save time, used as a cache signature
    """
    key: str
    data: Any
    updated_at: Optional[datetime] = None


class SeoSettingsRepository(ABC):
    """Abstract repository for admin-edited SEO settings."""

    RECORD_KINDS = ("global", "match", "league", "player")

    @abstractmethod
    def find_first_by_keys(self, kind: str, keys: Sequence[str]) -> Optional[SeoSettingsRecord]:
        """Get the first record of ``kind`` matching ``keys`` in order."""
        pass

    @abstractmethod
    def find_page_override(self, slugs: Sequence[str]) -> Optional[SeoSettingsRecord]:
        """Get the most recently updated page record whose slug is in ``slugs``."""
        pass
