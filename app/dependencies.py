# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Settings and the database pool are created once in create_app() and kept
# on app.state; nothing here reaches for a module-level global.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.services.user_service import UserService
from lib.database import Database


def get_app_settings(request: Request) -> Settings:
    """Get the settings the running app was built with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Get the app's database pool."""
    return request.app.state.database


def get_user_service(database: Database = Depends(get_database)) -> UserService:
    """Get a UserService bound to the app's database pool."""
    return UserService(database)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
