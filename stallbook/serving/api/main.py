"""
FastAPI Application Factory

Creates and configures the Stallbook API application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from stallbook.config import Settings, get_settings
from stallbook.domain.errors import EntryValidationError, StorageReadError
from stallbook.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from stallbook.serving.api.routes import (
    analytics_router,
    entries_router,
    expenses_router,
    health_router,
)
from stallbook.storage import RecordStore, create_kv_store, create_record_store

logger = structlog.get_logger(__name__)


def create_api_app(
    settings: Optional[Settings] = None,
    record_store: Optional[RecordStore] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (defaults to the cached settings)
        record_store: Store to serve from; built from settings when omitted

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Stallbook API", environment=settings.app_env)
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title="Stallbook API",
        description="Daily records and business metrics for a fruit and juice stall",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.record_store = record_store or create_record_store(create_kv_store(settings), settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(EntryValidationError)
    async def entry_validation_handler(request: Request, exc: EntryValidationError) -> JSONResponse:
        logger.info("Input rejected", path=request.url.path, field=exc.field, message=exc.message)
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(StorageReadError)
    async def storage_read_handler(request: Request, exc: StorageReadError) -> JSONResponse:
        logger.error("Stored data unreadable", path=request.url.path, key=exc.key, reason=exc.reason)
        return JSONResponse(
            status_code=503,
            content={"detail": "Stored data is unreadable; nothing was written", "key": exc.key},
        )

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(entries_router, prefix="/api/v1/entries", tags=["Entries"])
    app.include_router(expenses_router, prefix="/api/v1/expenses", tags=["Expenses"])
    app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])

    @app.get("/api/v1/info")
    def api_info():
        """API information endpoint."""
        return {
            "name": "Stallbook API",
            "version": settings.version,
            "environment": settings.app_env,
            "storage": settings.storage.backend,
        }

    return app
