"""Core app configuration, database and session storage."""

from inventory.core.config import get_settings, settings
from inventory.core.database import InventoryStoreError, get_db
from inventory.core.session_store import get_session_store

__all__ = ["InventoryStoreError", "get_db", "get_session_store", "get_settings", "settings"]
