"""Core app configuration, database and session state."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.sessions import SessionStore

__all__ = ["get_settings", "settings", "get_db", "SessionStore"]
