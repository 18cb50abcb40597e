"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: the adapter is chosen from the DATABASE_URL scheme
- Connection pooling: configured per database type
- Async session management: one session per request
- Error handling: automatic rollback on exceptions

The Database object is built from an explicit Settings instance and kept on
app.state, so tests can build isolated databases side by side.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlinks.core.setting import Settings
from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.postgres_adapter import PostgreSQLAdapter
from shortlinks.db.sqlite_adapter import SQLiteAdapter


def get_database_adapter(settings: Settings) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for DATABASE_URL.

    Raises:
        ValueError: If the URL scheme is not supported
    """
    scheme = settings.DATABASE_URL.split(":", 1)[0].lower()
    dialect = scheme.split("+", 1)[0]

    if dialect == "sqlite":
        return SQLiteAdapter()
    if dialect in ("postgresql", "postgres"):
        return PostgreSQLAdapter(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
    raise ValueError(f"Unsupported database URL scheme: '{scheme}'")


class Database:
    """
    Owns the async engine and the session factory for one process.
    """

    def __init__(self, settings: Settings):
        self.adapter = get_database_adapter(settings)
        self.engine = self.adapter.create_engine(settings.DATABASE_URL)

        # expire_on_commit=False keeps returned objects readable after commit
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=SQLModelAsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session that commits on success and rolls back on error.
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables (tests and local development; production uses alembic)."""
        async with self.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
