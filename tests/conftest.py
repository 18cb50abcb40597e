"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from shortlinks.core.setting import Settings
from shortlinks.db.session import Database
from shortlinks.main import create_app
from shortlinks.services.link_service import LinkService
from shortlinks.services.link_store import InMemoryLinkStore, SQLLinkStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'shortlinks-test.db'}",
        LOG_LEVEL="debug",
        ALLOWED_HOSTS="http://localhost:3000",
    )


@pytest_asyncio.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    database = Database(settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def sql_store(database) -> AsyncGenerator[SQLLinkStore, None]:
    async with database.session_maker() as session:
        yield SQLLinkStore(session)


@pytest.fixture
def memory_store() -> InMemoryLinkStore:
    return InMemoryLinkStore()


@pytest.fixture
def link_service(memory_store) -> LinkService:
    return LinkService(memory_store)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client talking to the app in-process, with tables created."""
    await app.state.database.create_all()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    await app.state.database.dispose()
