"""FastAPI application factory and bootstrap helpers."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront_catalog.api.routes import include_api_routes
from storefront_catalog.config import settings
from storefront_catalog.services.catalog.exceptions import (
    CatalogNotInitializedError,
    CatalogOutageError,
    CatalogUnavailableError,
)
from storefront_catalog.services.catalog.registry import get_catalog_registry
from storefront_catalog.services.storage.catalog_store import (
    bootstrap_catalogs,
    build_catalog_stores,
)
from storefront_catalog.services.storage.redis_client import get_redis_client
from storefront_catalog.services.taxonomy.category_taxonomy import get_taxonomy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the taxonomy and make sure every catalog exists before serving."""
    taxonomy = get_taxonomy()
    logger.info("Serving with category taxonomy %s", taxonomy.version)

    stores = build_catalog_stores(get_redis_client(), get_catalog_registry())
    try:
        created = await bootstrap_catalogs(stores)
        if created:
            logger.info("Bootstrapped catalogs: %s", ", ".join(created))
    except CatalogUnavailableError:
        logger.exception("Failed bootstrapping catalogs on startup")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Storefront Catalog",
        description="Federated product catalog resolution and search",
        version="1.0.0",
        lifespan=lifespan,
    )

    _configure_cors(app)
    _register_error_handlers(app)
    include_api_routes(app)

    return app


def _configure_cors(app: FastAPI) -> None:
    """Allow broad access in non-production environments."""

    if settings.is_production:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _register_error_handlers(app: FastAPI) -> None:
    """Map storage failures that survive the engine's own recovery to 503."""

    @app.exception_handler(CatalogOutageError)
    @app.exception_handler(CatalogNotInitializedError)
    @app.exception_handler(CatalogUnavailableError)
    async def _catalog_unavailable(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Catalog storage unavailable for %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )
