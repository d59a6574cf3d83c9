# =============================================================================
# app/server.py - Process Entry Point
# =============================================================================
# Loads settings, builds the app and hands it to uvicorn.
#
# Startup is fail-fast:
# - Missing/invalid settings: logged, exit code 1
# - Database unreachable: lifespan startup fails, uvicorn exits nonzero
#   before binding the port
# - Port unbindable: uvicorn exits nonzero
#
# Usage:
#   PORT=5000 python -m app
# =============================================================================

import logging
import sys

import uvicorn
from pydantic import ValidationError

from app.config import get_settings
from app.main import configure_logging, create_app

logger = logging.getLogger(__name__)


def run() -> None:
    """Start the HTTP listener on the configured port."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid configuration, refusing to start:\n{e}")
        sys.exit(1)

    configure_logging(settings)
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        # Startup errors must abort instead of being ignored
        lifespan="on",
        log_level="debug" if settings.DEBUG else "info",
    )
