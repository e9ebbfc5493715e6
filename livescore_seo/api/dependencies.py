"""
API Dependencies Module

Provides dependency injection for FastAPI routes.
Contains factory functions for the SEO resolver and its collaborators.
"""

from functools import lru_cache

from livescore_seo.application.services.seo_resolver import SeoResolver
from livescore_seo.domain.services.league_seo_service import LeagueSeoService
from livescore_seo.domain.services.match_seo_service import MatchSeoService
from livescore_seo.domain.services.player_seo_service import PlayerSeoService
from livescore_seo.infrastructure.config.seo_store_provider import SeoConfigProvider
from livescore_seo.infrastructure.data_sources.api_sports import APISportsSource
from livescore_seo.infrastructure.repositories.seo_settings_repository import (
    SqlSeoSettingsRepository,
    get_seo_settings_repository,
)


@lru_cache()
def get_api_sports() -> APISportsSource:
    """Get API-Sports data source (cached)."""
    return APISportsSource()


@lru_cache()
def get_settings_repository() -> SqlSeoSettingsRepository:
    """Get SEO settings repository (cached)."""
    return get_seo_settings_repository()


@lru_cache()
def get_seo_config_provider() -> SeoConfigProvider:
    """Get the layered SEO config provider (one per process)."""
    return SeoConfigProvider(repository=get_settings_repository())


@lru_cache()
def get_seo_resolver() -> SeoResolver:
    """Get SEO resolver (cached)."""
    source = get_api_sports()
    return SeoResolver(
        provider=get_seo_config_provider(),
        match_builder=MatchSeoService(source),
        league_builder=LeagueSeoService(source),
        player_builder=PlayerSeoService(source),
        page_repository=get_settings_repository(),
    )
