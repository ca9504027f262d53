"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.api.responses import install_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account Registration API v1 - Create an identity and a profile in one step",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the shared HTTP client for the hosted identity backend
    - Closes both on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store handles in app state for dependency injection
    app.state.pool = pool
    app.state.http_client = None
    if settings.identity_backend == "gotrue":
        logger.info("Using hosted identity backend at %s", settings.gotrue_url)
        app.state.http_client = httpx.Client(timeout=settings.http_timeout_seconds)
    else:
        logger.info("Using self-hosted identity backend")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if app.state.http_client is not None:
        app.state.http_client.close()
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="accountgate",
    description="Account Registration API - Two-store account creation with compensation",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)
install_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
