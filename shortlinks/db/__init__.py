"""
Database module with abstraction layer.

This module provides:
- Link: the persisted SQLModel table
- DatabaseAdapter interface with SQLite and PostgreSQL implementations
- Database: engine and session factory built from Settings
- get_session: FastAPI dependency yielding a per-request session
"""

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.models import Link
from shortlinks.db.session import Database, get_database_adapter, get_session

__all__ = [
    "DatabaseAdapter",
    "Database",
    "Link",
    "get_database_adapter",
    "get_session",
]
