"""Write dependencies clear cached data only after their transaction commits."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

import msls.api.v1.dependencies.tenant as tenant_deps
from msls.core.cache_keys import feature_key, tenant_key
from msls.domain.enums import TenantStatus
from tests.conftest import MemoryCache


def _transaction(fail_on_commit: bool):
    @asynccontextmanager
    async def transaction() -> AsyncIterator[AsyncMock]:
        yield AsyncMock()
        if fail_on_commit:
            raise OperationalError("COMMIT", {}, Exception("connection lost"))

    return transaction


@pytest.fixture
def cache() -> MemoryCache:
    cache = MemoryCache()
    cache.data[feature_key("t1")] = [{"key": "online_admissions"}]
    cache.data[tenant_key("t1")] = {"id": "t1", "status": "active"}
    return cache


async def test_flag_cache_survives_failed_commit(
    monkeypatch: pytest.MonkeyPatch, cache: MemoryCache
) -> None:
    monkeypatch.setattr(tenant_deps, "platform_transaction", _transaction(fail_on_commit=True))
    deps = tenant_deps.get_feature_flag_service_for_write(cache)
    flags = await anext(deps)
    await flags.invalidate("t1")
    with pytest.raises(OperationalError):
        await anext(deps)
    assert feature_key("t1") in cache.data


async def test_flag_cache_cleared_after_commit(
    monkeypatch: pytest.MonkeyPatch, cache: MemoryCache
) -> None:
    monkeypatch.setattr(tenant_deps, "platform_transaction", _transaction(fail_on_commit=False))
    deps = tenant_deps.get_feature_flag_service_for_write(cache)
    flags = await anext(deps)
    await flags.invalidate("t1")
    assert feature_key("t1") in cache.data
    with pytest.raises(StopAsyncIteration):
        await anext(deps)
    assert feature_key("t1") not in cache.data


async def test_tenant_cache_survives_failed_commit(
    monkeypatch: pytest.MonkeyPatch, cache: MemoryCache
) -> None:
    monkeypatch.setattr(tenant_deps, "platform_transaction", _transaction(fail_on_commit=True))
    deps = tenant_deps.get_tenant_service_for_write(cache)
    tenants = await anext(deps)
    tenants.tenant_repo = AsyncMock()
    tenants.tenant_repo.get_by_id.return_value = SimpleNamespace(
        id="t1", slug="greenwood", name="Greenwood High", status="active"
    )
    tenants.tenant_repo.update.side_effect = lambda obj: obj
    await tenants.change_status("t1", TenantStatus.SUSPENDED)
    with pytest.raises(OperationalError):
        await anext(deps)
    assert cache.data[tenant_key("t1")]["status"] == "active"
