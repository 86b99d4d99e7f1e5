"""Redis-based cache service.

Async Redis caching with TTL support for tenant lookups, resolved permissions
and feature flag maps. Key format lives in msls.core.cache_keys.
Cache failures never fail a request: operations log and report a miss.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from msls.core.config import RedisSettings

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis cache service with TTL support.

    Call connect() at startup and disconnect() at shutdown.
    """

    def __init__(
        self,
        settings: RedisSettings,
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            settings: REDIS_* connection settings.
            redis_client: Optional Redis client for testing; treated as connected.
        """
        self.settings = settings
        self.redis = redis_client
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. On failure the cache stays disabled."""
        if self.redis is not None:
            return
        password = self.settings.password.get_secret_value() or None
        client = redis.Redis(
            host=self.settings.host,
            port=self.settings.port,
            db=self.settings.db,
            password=password,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            max_connections=self.settings.max_connections,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info("Redis cache connected: %s", self.settings.address)

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    def _client(self) -> redis.Redis | None:
        return self.redis if self._connected else None

    async def ping(self) -> bool:
        client = self._client()
        if client is None:
            return False
        try:
            return bool(await client.ping())
        except redis.RedisError:
            logger.warning("Redis ping failed")
            return False

    async def get(self, key: str) -> Any | None:
        """Decoded JSON value, or None on a miss or when Redis is unreachable."""
        client = self._client()
        if client is None:
            return None
        try:
            raw = await client.get(key)
        except redis.RedisError:
            logger.exception("Cache read failed for %s", key)
            return None
        logger.debug("cache %s %s", "hit" if raw is not None else "miss", key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value as JSON for ttl seconds (at least 1). False when nothing was written."""
        client = self._client()
        if client is None:
            return False
        try:
            await client.setex(key, max(1, int(ttl)), json.dumps(value))
        except redis.RedisError:
            logger.exception("Cache write failed for %s", key)
            return False
        return True

    async def delete(self, key: str) -> bool:
        client = self._client()
        if client is None:
            return False
        try:
            await client.delete(key)
        except redis.RedisError:
            logger.exception("Cache delete failed for %s", key)
            return False
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Args:
            pattern: Redis SCAN match pattern (e.g. feature:tenant-123:*).

        Returns:
            Number of keys deleted.
        """
        client = self._client()
        if client is None:
            return 0
        chunk_size = 500
        deleted = 0
        chunk: list[str] = []
        try:
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= chunk_size:
                    deleted += int(await client.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await client.unlink(*chunk) or 0)
        except redis.RedisError:
            logger.exception("Cache delete_pattern error for %s", pattern)
            return deleted
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted
