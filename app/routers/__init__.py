# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# Routers that aren't part of a feature package:
# - health.py: Health check endpoints
#
# Each router is mounted in main.py under the /api prefix.
# =============================================================================

from . import health

__all__ = [
    "health",
]
