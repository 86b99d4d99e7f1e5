"""Shared infrastructure from app.state (set up in lifespan)."""

from __future__ import annotations

from fastapi import Request

from msls.core.config import get_settings
from msls.infrastructure.cache.redis_cache import CacheService
from msls.infrastructure.security.jwt import TokenService
from msls.infrastructure.storage.object_storage import ObjectStorageService


def get_cache(request: Request) -> CacheService | None:
    """Redis cache, or None when disabled / not started."""
    return getattr(request.app.state, "cache", None)


def get_storage(request: Request) -> ObjectStorageService | None:
    return getattr(request.app.state, "storage", None)


def get_token_service() -> TokenService:
    return TokenService(get_settings().jwt)


def tenant_cache_ttl() -> int:
    return int(get_settings().tenant.cache_ttl.total_seconds())


def feature_cache_ttl() -> int:
    return int(get_settings().tenant.feature_cache_ttl.total_seconds())
