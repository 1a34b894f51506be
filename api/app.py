"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.config import Settings
from api.errors import setup_exception_handlers
from api.middleware import LoggingMiddleware
from api.routes import build_prices_router
from ingestion.schema import ensure_prices_schema
from pricedb import create_service
from pricedb.service import DatabaseService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the storage pool and ensure the schema; close the pool on shutdown."""
    service: DatabaseService = app.state.service
    service.connect()
    try:
        ensure_prices_schema(service)
        logger.info("Storage ready (%s)", service.dialect)
        yield
    finally:
        service.close()
        logger.info("Storage closed")


def create_app(
    service: DatabaseService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create the app around a storage service.

    Without an explicit service, one is built from settings.db_url. The
    service is connected on startup and closed on shutdown.
    """
    settings = settings or Settings.from_env()
    if service is None:
        service = create_service(settings.db_url, settings.db_pool_size)

    app = FastAPI(
        title="pricedb",
        description="Import and export price records as zipped CSV",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.settings = settings

    app.add_middleware(LoggingMiddleware)
    setup_exception_handlers(app)
    app.include_router(build_prices_router())
    return app
