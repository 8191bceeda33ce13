"""Core app configuration, database and errors."""

from designhub.core.config import get_settings, settings
from designhub.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
