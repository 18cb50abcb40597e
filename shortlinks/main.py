"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes (/link, /health)
- Middleware (request logging, CORS)
- The database handle, built from an explicit Settings object

create_app() takes the settings to use; the module-level `app` is built
from the process environment for `uvicorn shortlinks.main:app`.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortlinks.api import endpoints
from shortlinks.core.logging_config import configure_logging
from shortlinks.core.setting import Settings, get_settings
from shortlinks.db.session import Database
from shortlinks.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        f"Starting link service: env={settings.ENV_SETTING.value}, "
        f"database={app.state.database.adapter.get_dialect_name()}, "
        f"allowed_origin={settings.ALLOWED_HOSTS}"
    )
    yield
    await app.state.database.dispose()
    logger.info("Database connections closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration to use (defaults to the process settings)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL.value)

    app = FastAPI(
        title="Link Shortener Service",
        description="Creates, resolves and deletes short links",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings)

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ALLOWED_HOSTS],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Authorization", "Accept", "Content-Type"],
        max_age=3600,
    )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy"}

    app.include_router(endpoints.router, tags=["Link"])

    return app


app = create_app()


def run() -> None:
    """Start uvicorn on HOST:PORT with LOG_LEVEL."""
    settings = get_settings()
    logger.debug(f"Start server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "shortlinks.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.value,
    )


if __name__ == "__main__":
    run()
