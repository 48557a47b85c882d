"""System-level routes such as health checks."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from redis.exceptions import RedisError

from storefront_catalog.api.dependencies import RedisDependency
from storefront_catalog.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def read_root() -> dict[str, str]:
    """Hello World endpoint used by smoke tests."""

    return {"message": "Hello World"}


@router.get("/health")
async def health_check(client: RedisDependency) -> dict[str, str]:
    """Health check endpoint with document store connectivity check."""

    try:
        store_status = "connected" if await client.ping() else "disconnected"
    except (RedisError, OSError):
        logger.debug("Redis ping failed", exc_info=True)
        store_status = "disconnected"

    return {
        "status": "healthy",
        "store": store_status,
        "environment": settings.ENVIRONMENT,
    }
