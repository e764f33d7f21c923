"""Database utilities for the tag system."""

from tag_system.db.connection import get_connection, init_schema, DEFAULT_DB_PATH, IN_MEMORY
from tag_system.db.tag_store import TagStore

__all__ = ["get_connection", "init_schema", "DEFAULT_DB_PATH", "IN_MEMORY", "TagStore"]
