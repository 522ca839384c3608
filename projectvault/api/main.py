"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from projectvault.adapters.repository.postgres import run_migrations
from projectvault.api.auth import router as auth_router
from projectvault.api.dependencies import build_passcode_repository
from projectvault.api.errors import register_exception_handlers
from projectvault.config.settings import get_settings
from projectvault.domain.janitor import PasscodeJanitor

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Passcode login for verified students - request, verify, profile, logout",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations (postgres backend)
    - Starts the passcode janitor
    - Stops the janitor and closes the pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
    else:
        logger.warning("Using in-memory storage; data is lost on restart")

    # Store pool in app state for dependency injection
    app.state.pool = pool

    janitor = None
    if settings.janitor_enabled:
        janitor = PasscodeJanitor(
            build_passcode_repository(settings, pool),
            interval_seconds=settings.janitor_interval_seconds,
        )
        janitor.start()
    app.state.janitor = janitor

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if janitor is not None:
        janitor.stop()
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="projectvault",
        description="Campus project vault - passcode authentication for verified students",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    register_exception_handlers(application)
    application.include_router(auth_router, prefix="/auth")

    @application.get("/health")
    async def health_check(request: Request) -> dict[str, str]:
        """
        Health check endpoint with database validation.

        Returns 200 OK if application and database are healthy.
        Raises exception if database connection fails.
        """
        pool = getattr(request.app.state, "pool", None)
        if pool is not None:
            with pool.connection() as conn:
                conn.execute("SELECT 1")

        return {"status": "healthy"}

    return application


app = create_app()
