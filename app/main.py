# =============================================================================
# app/main.py - FastAPI Application Factory
# =============================================================================
# Builds the Auth API application: request pipeline, database lifecycle,
# exception handlers and routers.
#
# Usage:
#   python -m app
#   uvicorn app.main:build_app --factory
# =============================================================================

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.auth import routes as auth_routes
from app.config import Settings, get_settings
from app.exceptions import (
    AuthApiException,
    auth_api_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.middleware import build_pipeline
from app.routers import health
from lib.database import Database

logger = logging.getLogger(__name__)

# Every route lives under this prefix; anything else is a 404
API_PREFIX = "/api"


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(settings: Settings, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Immutable settings, stored on app.state.settings
        database: Database pool (built from settings if omitted)

    Returns:
        FastAPI: The configured application. The database is connected
        during lifespan startup; if that fails, startup is aborted and the
        server never starts listening.
    """
    if database is None:
        database = Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        - Startup: connect the database pool (fatal on failure)
        - Shutdown: drop pooled clients
        """
        logger.info(f"Starting Auth API in {settings.ENVIRONMENT} mode")
        logger.info(f"CORS origins: {settings.cors_origins_list}")
        logger.info(f"Request pipeline: {app.state.pipeline}")

        await database.connect()
        logger.info(f"Startup complete, binding port {settings.PORT}")

        yield

        logger.info("Shutting down Auth API")
        await database.close()

    pipeline = build_pipeline(settings)

    app = FastAPI(
        title="Auth API",
        description="Account registration and cookie-based authentication.",
        version=__version__,
        docs_url=f"{API_PREFIX}/docs",
        redoc_url=None,
        openapi_url=f"{API_PREFIX}/openapi.json",
        lifespan=lifespan,
        middleware=[stage.middleware for stage in pipeline],
        openapi_tags=[
            {
                "name": "Auth",
                "description": "Register, log in, log out and fetch the current user",
            },
            {
                "name": "Health",
                "description": "API health and readiness checks",
            },
        ],
    )

    app.state.settings = settings
    app.state.database = database
    app.state.pipeline = [stage.name for stage in pipeline]

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    app.add_exception_handler(AuthApiException, auth_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------

    # Authentication endpoints (/api/auth/...)
    app.include_router(auth_routes.router, prefix=API_PREFIX)

    # Health check endpoints (/api/health...)
    app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

    return app


def build_app() -> FastAPI:
    """Build the app from environment settings (uvicorn --factory target)."""
    settings = get_settings()
    configure_logging(settings)
    return create_app(settings)
