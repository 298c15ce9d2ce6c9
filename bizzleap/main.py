"""
FastAPI application factory.

Creates and configures the FastAPI application instance. The database
handle is opened in the lifespan: if the store is unreachable at startup
the error propagates and the server process exits instead of serving
traffic.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bizzleap.api.error_handlers import register_exception_handlers
from bizzleap.api.router import api_router
from bizzleap.core.clock import Clock, utcnow
from bizzleap.core.config import Settings, settings as default_settings
from bizzleap.core.logging import setup_logging
from bizzleap.core.rate_limit import RateLimiter
from bizzleap.db.session import Database
from bizzleap.services.oauth_client import OAuthClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    try:
        database.open()
    except Exception:
        logger.critical("Failed to connect to database, shutting down", exc_info=True)
        raise
    try:
        yield
    finally:
        database.close()


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None,
               oauth_client: Optional[OAuthClient] = None, clock: Clock = utcnow) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings (defaults to the environment)
        database: Store handle; built from settings when omitted
        oauth_client: OAuth provider client; built from settings when omitted
        clock: Source of "now" for tokens and sessions
    """
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="BizzLeap marketplace authentication and user profiles.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan)

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.oauth_client = oauth_client or OAuthClient(settings)
    app.state.clock = clock
    app.state.auth_rate_limiter = RateLimiter(settings.AUTH_RATE_LIMIT, settings.AUTH_RATE_LIMIT_WINDOW_SECONDS, clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "BizzLeap API",
            "version": settings.VERSION,
            "status": "healthy"
        }

    return app
