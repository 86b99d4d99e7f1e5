"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring (cache, object storage, DB engine
dispose). No business logic here.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI

from msls.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: Redis cache (if enabled), object storage bucket bootstrap.
    Shutdown order: cache disconnect, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.redis.enabled:
        from msls.infrastructure.cache.redis_cache import CacheService

        cache = CacheService(settings.redis)
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None

    from msls.infrastructure.storage.object_storage import ObjectStorageService

    storage = ObjectStorageService(settings.minio)
    try:
        await storage.ensure_bucket()
    except (BotoCoreError, ClientError) as e:
        logger.warning("Object storage bootstrap failed (%s); uploads will fail until it is reachable", e)
    app.state.storage = storage

    logger.info("%s %s started (env=%s)", settings.app.name, settings.app.version, settings.app.env)

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    from msls.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
