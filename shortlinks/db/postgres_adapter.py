"""
PostgreSQL Database Adapter

This module implements the DatabaseAdapter interface for PostgreSQL
(asyncpg driver). Unlike SQLite, PostgreSQL benefits from a shared
connection pool: concurrent requests borrow connections from it and the
server provides transaction isolation.
"""

from typing import Any, Optional

from sqlalchemy.pool import Pool

from shortlinks.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL adapter with a sized, pre-pinged connection pool."""

    def __init__(self, pool_size: int = 5, max_overflow: int = 10):
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> Optional[type[Pool]]:
        # SQLAlchemy picks AsyncAdaptedQueuePool for async engines
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
        }

    def get_dialect_name(self) -> str:
        return "postgresql"
