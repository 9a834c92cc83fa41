"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shelfbase.core.config import get_settings
from shelfbase.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from shelfbase.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from shelfbase.infrastructure.search import SearchIndexSynchronizer, SqliteSearchEngine

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the canonical database and the search index on startup and
    closes both on shutdown.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting ShelfBase",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    search_engine = SqliteSearchEngine(
        settings.search_database_url,
        timeout_seconds=settings.search_timeout_seconds,
        default_limit=settings.search_result_limit,
    )
    await search_engine.connect()
    app.state.search_engine = search_engine
    app.state.synchronizer = SearchIndexSynchronizer(search_engine)

    yield

    logger.info(
        "Shutting down ShelfBase",
        pending_search_syncs=app.state.synchronizer.pending,
    )
    await app.state.synchronizer.drain()
    logger.info("Search index synced", search_sync_failures=app.state.synchronizer.failures)
    await search_engine.close()
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Self-hosted backend for user-owned collections with typed schemas",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints."""

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity or other dependencies.
        """
        return {
            "status": "healthy",
            "service": "ShelfBase",
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint.

        Returns 200 when both the database and the search index respond.
        """
        db_healthy = await get_db_manager().check_connection()
        search_engine = getattr(app.state, "search_engine", None)
        search_healthy = search_engine is not None and await search_engine.health_check()

        content = {
            "service": "ShelfBase",
            "version": get_settings().app_version,
            "database": "connected" if db_healthy else "disconnected",
            "search": "connected" if search_healthy else "disconnected",
        }
        if db_healthy and search_healthy:
            return {"status": "ready", **content}
        return JSONResponse(status_code=503, content={"status": "not_ready", **content})


def register_routes(app: FastAPI) -> None:
    """Register API routes."""
    from shelfbase.infrastructure.api.routes import (
        collections_router,
        comments_router,
        items_router,
        search_router,
        topics_router,
        users_router,
    )

    prefix = get_settings().api_prefix

    app.include_router(topics_router, prefix=f"{prefix}/topics", tags=["topics"])
    app.include_router(
        collections_router, prefix=f"{prefix}/collections", tags=["collections"]
    )
    app.include_router(items_router, prefix=f"{prefix}/items", tags=["items"])
    app.include_router(comments_router, prefix=f"{prefix}/comments", tags=["comments"])
    app.include_router(users_router, prefix=f"{prefix}/users", tags=["users"])
    app.include_router(search_router, prefix=prefix, tags=["search"])


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    @app.middleware("http")
    async def logging_middleware(request, call_next):
        """Log every request and tag it with a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info("Request started", method=request.method, path=str(request.url.path))
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
