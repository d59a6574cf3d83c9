# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the web application:
# - main.py: App factory - request pipeline, error handlers, routers
# - middleware.py: Ordered request pipeline stages
# - config.py: Environment variable loading and settings
# - server.py: Process entry point (python -m app)
# - auth/: Registration, login and cookie-based sessions
# - routers/: Other API endpoints
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
