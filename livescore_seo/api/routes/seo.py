"""
SEO Router

API endpoints the page layer calls to get metadata for each public route.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from livescore_seo.api.dependencies import get_seo_config_provider, get_seo_resolver
from livescore_seo.application.dtos.dtos import (
    BrandDTO,
    ErrorResponseDTO,
    ResolvedSeoDTO,
    SeoEntryDTO,
)
from livescore_seo.application.services.seo_resolver import SeoResolver
from livescore_seo.domain.constants import (
    DEFAULT_MATCH_TAB,
    STATIC_PAGE_KEY_ALIASES,
    STATIC_PAGE_PATHS,
)
from livescore_seo.domain.entities.entities import ResolvedSeo
from livescore_seo.infrastructure.config.seo_store_provider import SeoConfigProvider


router = APIRouter(prefix="/seo", tags=["SEO"])

PATHNAME_QUERY = Query(default=None, description="Route path to use as the canonical (e.g. /contact/)")


def _to_dto(resolved: ResolvedSeo) -> ResolvedSeoDTO:
    return ResolvedSeoDTO(
        entry=SeoEntryDTO.from_entry(resolved.entry),
        metadata=resolved.metadata,
        canonical_path=resolved.canonical_path,
    )


@router.get(
    "/home",
    response_model=ResolvedSeoDTO,
    summary="Home page SEO",
)
async def get_home_seo(resolver: SeoResolver = Depends(get_seo_resolver)) -> ResolvedSeoDTO:
    """Resolve metadata for the home page."""
    return _to_dto(await resolver.resolve_home())


@router.get(
    "/pages/{page_key}",
    response_model=ResolvedSeoDTO,
    responses={
        404: {"model": ErrorResponseDTO, "description": "Unknown static page"},
    },
    summary="Static page SEO",
    description="Resolve metadata for contact, privacy policy or terms of service.",
)
async def get_static_page_seo(
    page_key: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    """Resolve metadata for a static page."""
    if page_key not in STATIC_PAGE_PATHS and page_key not in STATIC_PAGE_KEY_ALIASES:
        raise HTTPException(status_code=404, detail=f"Static page not found: {page_key}")
    return _to_dto(await resolver.resolve_static_page(page_key, pathname=pathname))


@router.get(
    "/sports/{sport}/{tab}",
    response_model=ResolvedSeoDTO,
    summary="Sports tab SEO",
)
async def get_sports_tab_seo(
    sport: str,
    tab: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_sports_tab(sport, tab, pathname=pathname))


@router.get(
    "/sports/{sport}/{tab}/league/{league_id}",
    response_model=ResolvedSeoDTO,
    summary="League SEO",
)
async def get_league_seo(
    sport: str,
    tab: str,
    league_id: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_league(sport, tab, league_id, pathname=pathname))


@router.get(
    "/leagues/{sport}/{league_slug}",
    response_model=ResolvedSeoDTO,
    summary="League landing page SEO",
    description="Resolve metadata for a slug-addressed league page such as /football/bundesliga/.",
)
async def get_league_page_seo(
    sport: str,
    league_slug: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_league_page(sport, league_slug, pathname=pathname))


@router.get(
    "/leagues/{sport}/{league_slug}/{tab}",
    response_model=ResolvedSeoDTO,
    summary="League landing page tab SEO",
)
async def get_league_page_tab_seo(
    sport: str,
    league_slug: str,
    tab: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_league_page(sport, league_slug, tab, pathname=pathname))


@router.get(
    "/match/{sport}/{match_id}",
    response_model=ResolvedSeoDTO,
    summary="Match SEO (summary tab)",
)
async def get_match_seo(
    sport: str,
    match_id: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_match(sport, match_id, DEFAULT_MATCH_TAB, pathname=pathname))


@router.get(
    "/match/{sport}/{match_id}/{tab}",
    response_model=ResolvedSeoDTO,
    summary="Match SEO",
)
async def get_match_tab_seo(
    sport: str,
    match_id: str,
    tab: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_match(sport, match_id, tab, pathname=pathname))


@router.get(
    "/player/{sport}/{player_id}",
    response_model=ResolvedSeoDTO,
    summary="Player SEO",
)
async def get_player_seo(
    sport: str,
    player_id: str,
    pathname: Optional[str] = PATHNAME_QUERY,
    resolver: SeoResolver = Depends(get_seo_resolver),
) -> ResolvedSeoDTO:
    return _to_dto(await resolver.resolve_player(sport, player_id, pathname=pathname))


@router.get(
    "/brand",
    response_model=BrandDTO,
    summary="Public brand payload",
    description="Brand, sport labels, header and footer for the site chrome. Never cached.",
)
async def get_brand(
    response: Response,
    provider: SeoConfigProvider = Depends(get_seo_config_provider),
) -> BrandDTO:
    """Get the public brand payload."""
    store = await provider.get_async_snapshot()
    brand = store.brand

    response.headers["Cache-Control"] = "no-store, max-age=0"
    return BrandDTO(
        site_name=brand.site_name or "Live Score",
        logo_title=brand.logo_title or brand.site_name or "Live Score",
        logo_url=brand.logo_url or "/brand/logo.svg",
        tagline=brand.tagline or "",
        site_url=brand.site_url,
        favicon_url=brand.favicon_url or "/favicon.ico",
        theme_color=brand.theme_color or None,
        sport_labels=dict(store.labels.sport_labels),
        header=store.header.model_dump(by_alias=True) if store.header else {},
        footer=store.footer.model_dump(by_alias=True) if store.footer else {},
    )
