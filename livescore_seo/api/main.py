"""
Live Score SEO Service - FastAPI Application

Main entry point for the SEO API.
This module configures the FastAPI app, logging, middleware, and routes.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from livescore_seo import __version__
from livescore_seo.api.routes import seo
from livescore_seo.application.dtos.dtos import HealthResponseDTO, ErrorResponseDTO
from livescore_seo.utils.time_utils import get_current_time


# Custom logging formatter: timestamps in UTC
class UTCTimeFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        ct = get_current_time()
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            t = ct.strftime("%Y-%m-%d %H:%M:%S")
            s = "%s,%03d" % (t, record.msecs)
        return s

formatter = UTCTimeFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
handler = logging.StreamHandler()
handler.setFormatter(formatter)
root_logger = logging.getLogger()
root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
root_logger.handlers = [handler]
logger = logging.getLogger(__name__)


# Application metadata
APP_TITLE = "Live Score SEO Service"
APP_DESCRIPTION = """
**Layered SEO metadata for a multi-sport live-score site**

Resolves titles, descriptions, canonicals, Open Graph and JSON-LD for every
public route: home, static pages, sports tabs, leagues, matches and players.

## Configuration layers (lowest to highest)

- Compiled defaults
- JSON files in the SEO config directory
- `SEO_CONFIG_JSON` environment blob
- Admin-edited database rows

Match, league and player pages are enriched with API-Sports data when it
answers in time; otherwise generic strings are used.
"""
APP_VERSION = __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {APP_TITLE} v{APP_VERSION}")

    from livescore_seo.api.dependencies import get_api_sports, get_seo_config_provider, get_settings_repository

    if get_api_sports().is_configured:
        logger.info("✓ API-Sports configured")
    else:
        logger.warning("⚠ API-Sports key not configured (CDN mirrors only)")

    provider = get_seo_config_provider()
    if provider.db_layer_enabled():
        try:
            get_settings_repository().create_tables()
            logger.info("✓ SEO settings tables ready")
        except Exception as e:
            logger.error(f"Could not prepare SEO settings tables: {e}")
    else:
        logger.info("SEO database layer disabled")

    yield

    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# Configure CORS
base_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
cors_origins = os.getenv("CORS_ORIGINS", "").split(",")
all_origins = list(set([o for o in base_origins + cors_origins if o]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=all_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponseDTO(
            error="internal_server_error",
            message="An unexpected error occurred",
            details={"path": str(request.url)},
        ).model_dump(),
    )


# Health check endpoint
@app.get(
    "/health",
    response_model=HealthResponseDTO,
    tags=["Health"],
    summary="Health check",
    description="Check if the API is running and healthy.",
)
async def health_check() -> HealthResponseDTO:
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        version=APP_VERSION,
        timestamp=get_current_time(),
    )


# Root endpoint
@app.get(
    "/",
    tags=["Root"],
    summary="API Information",
    description="Get basic API information and links.",
)
async def root():
    """Root endpoint with API info."""
    return {
        "name": APP_TITLE,
        "version": APP_VERSION,
        "documentation": "/docs",
        "health": "/health",
        "endpoints": {
            "home": "/api/v1/seo/home",
            "pages": "/api/v1/seo/pages/{page_key}",
            "sports": "/api/v1/seo/sports/{sport}/{tab}",
            "league": "/api/v1/seo/sports/{sport}/{tab}/league/{league_id}",
            "leaguePage": "/api/v1/seo/leagues/{sport}/{league_slug}",
            "match": "/api/v1/seo/match/{sport}/{match_id}/{tab}",
            "player": "/api/v1/seo/player/{sport}/{player_id}",
            "brand": "/api/v1/seo/brand",
        },
    }


# Include routers
app.include_router(seo.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "livescore_seo.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
