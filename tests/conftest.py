"""Pytest configuration and fixtures for msls.

HTTP tests build the app with msls.main.create_app() and replace database
backed services through app.dependency_overrides; no database or Redis is
needed unless a test is marked requires_db.
"""

import fnmatch
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from msls.core.config import get_settings
from msls.core.limiter import limiter
from msls.core.tenant_validation import is_valid_tenant_id_format
from msls.domain.context import TenantContext
from msls.domain.exceptions import (
    InvalidTenantIdException,
    TenantNotFoundException,
    TenantUnavailableException,
)
from msls.infrastructure.security.jwt import TokenService
from msls.main import create_app

ACTIVE_TENANT = TenantContext(tenant_id="school-a", status="active", slug="school-a", name="School A")
SUSPENDED_TENANT = TenantContext(
    tenant_id="school-s", status="suspended", slug="school-s", name="School S"
)


class MemoryCache:
    """In-process stand-in for CacheService (same async surface)."""

    def __init__(self, available: bool = True) -> None:
        self.data: dict[str, Any] = {}
        self.available = available

    def is_available(self) -> bool:
        return self.available

    async def ping(self) -> bool:
        return self.available

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        self.data[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        keys = [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]
        for key in keys:
            del self.data[key]
        return len(keys)


class FakeTenantService:
    """resolve/require_active over a fixed set of tenants."""

    def __init__(self, *tenants: TenantContext) -> None:
        self.tenants: dict[str, TenantContext] = {}
        for tenant in tenants:
            self.tenants[tenant.tenant_id] = tenant
            if tenant.slug:
                self.tenants[tenant.slug] = tenant

    async def resolve(self, value: str) -> TenantContext:
        if not is_valid_tenant_id_format(value):
            raise InvalidTenantIdException()
        if value not in self.tenants:
            raise TenantNotFoundException(value)
        return self.tenants[value]

    async def require_active(self, value: str) -> TenantContext:
        tenant = await self.resolve(value)
        if not tenant.is_active:
            raise TenantUnavailableException(tenant.tenant_id, tenant.status)
        return tenant


class FakeFlagService:
    """enabled_keys from a fixed map tenant_id -> feature keys."""

    def __init__(self, enabled: dict[str, set[str]] | None = None) -> None:
        self.enabled = enabled or {}

    async def enabled_keys(self, tenant_id: str, user_id: str | None = None) -> frozenset[str]:
        return frozenset(self.enabled.get(tenant_id, set()))


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> Iterator[None]:
    """Run each test from an empty directory (no .env) with freshly loaded settings."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    limiter.reset()
    yield
    get_settings.cache_clear()


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(get_settings().jwt)


@pytest.fixture
def make_token(token_service: TokenService) -> Callable[..., str]:
    """Build an access token for a user in a tenant with the given grants."""

    def _make(
        user_id: str = "user-1",
        tenant_id: str = ACTIVE_TENANT.tenant_id,
        permissions: list[str] | None = None,
        roles: list[str] | None = None,
    ) -> str:
        return token_service.create_access_token(
            {
                "sub": user_id,
                "tenant_id": tenant_id,
                "permissions": permissions or [],
                "roles": roles or [],
            }
        )

    return _make


@pytest.fixture
def app() -> FastAPI:
    """Fresh application with tenant and flag lookups served from memory."""
    from msls.api.v1.dependencies import get_feature_flag_service, get_tenant_service

    application = create_app()
    tenants = FakeTenantService(ACTIVE_TENANT, SUSPENDED_TENANT)
    flags = FakeFlagService()
    application.state.fake_tenants = tenants
    application.state.fake_flags = flags
    application.dependency_overrides[get_tenant_service] = lambda: tenants
    application.dependency_overrides[get_feature_flag_service] = lambda: flags
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
