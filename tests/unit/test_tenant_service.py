"""Unit tests for TenantService (resolution cache, creation, status changes)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from msls.application.services.after_commit import AfterCommit
from msls.application.services.tenant_service import TenantService
from msls.core.cache_keys import tenant_key
from msls.core.constants import TENANT_CACHE_MISS_MARKER
from msls.domain.enums import TenantStatus
from msls.domain.exceptions import (
    InvalidTenantIdException,
    TenantNotFoundException,
    TenantStatusTransitionException,
    TenantUnavailableException,
    ValidationException,
)
from tests.conftest import MemoryCache


def _row(status: str = "active") -> SimpleNamespace:
    return SimpleNamespace(id="t1", slug="greenwood", name="Greenwood High", status=status)


async def test_resolve_rejects_malformed_value_without_lookup() -> None:
    repo = AsyncMock()
    with pytest.raises(InvalidTenantIdException):
        await TenantService(repo).resolve("bad value")
    repo.get_by_id_or_slug.assert_not_awaited()


async def test_resolve_caches_hit() -> None:
    repo = AsyncMock()
    repo.get_by_id_or_slug.return_value = _row()
    cache = MemoryCache()
    service = TenantService(repo, cache=cache)
    first = await service.resolve("greenwood")
    second = await service.resolve("greenwood")
    assert first == second
    assert first.tenant_id == "t1" and first.slug == "greenwood"
    assert repo.get_by_id_or_slug.await_count == 1


async def test_resolve_caches_miss() -> None:
    repo = AsyncMock()
    repo.get_by_id_or_slug.return_value = None
    cache = MemoryCache()
    service = TenantService(repo, cache=cache)
    for _ in range(2):
        with pytest.raises(TenantNotFoundException):
            await service.resolve("nowhere")
    assert cache.data[tenant_key("nowhere")] == TENANT_CACHE_MISS_MARKER
    assert repo.get_by_id_or_slug.await_count == 1


async def test_require_active() -> None:
    repo = AsyncMock()
    repo.get_by_id_or_slug.return_value = _row("suspended")
    with pytest.raises(TenantUnavailableException) as exc_info:
        await TenantService(repo).require_active("greenwood")
    assert exc_info.value.details["reason"] == "suspended"


async def test_create_tenant_runs_initializer_and_clears_cache() -> None:
    repo = AsyncMock()
    repo.create_tenant.return_value = _row()
    initializer = AsyncMock()
    initializer.initialize.return_value = "admin-1"
    cache = MemoryCache()
    cache.data[tenant_key("greenwood")] = TENANT_CACHE_MISS_MARKER
    service = TenantService(repo, cache=cache, initializer=initializer)

    result = await service.create_tenant(
        "greenwood", " Greenwood High ", admin_email="Admin@X.org", admin_password="pw-123456"
    )

    repo.create_tenant.assert_awaited_once_with(slug="greenwood", name="Greenwood High")
    tenant_ctx = initializer.initialize.await_args.args[0]
    assert tenant_ctx.tenant_id == "t1"
    assert result.admin_user_id == "admin-1"
    assert result.admin_email == "admin@x.org"
    assert result.status is TenantStatus.ACTIVE
    assert tenant_key("greenwood") not in cache.data


async def test_create_tenant_validates_slug() -> None:
    repo = AsyncMock()
    with pytest.raises(ValidationException):
        await TenantService(repo).create_tenant("Bad Slug", "X")
    repo.create_tenant.assert_not_awaited()


async def test_change_status_updates_and_invalidates() -> None:
    row = _row()
    repo = AsyncMock()
    repo.get_by_id.return_value = row
    repo.update.side_effect = lambda obj: obj
    cache = MemoryCache()
    cache.data[tenant_key("t1")] = {"id": "t1", "status": "active"}
    cache.data[tenant_key("greenwood")] = {"id": "t1", "status": "active"}

    ctx = await TenantService(repo, cache=cache).change_status("t1", TenantStatus.SUSPENDED)

    assert ctx.status == "suspended"
    assert row.status == "suspended"
    repo.update.assert_awaited_once()
    assert cache.data == {}


async def test_change_status_same_status_is_noop() -> None:
    repo = AsyncMock()
    repo.get_by_id.return_value = _row()
    await TenantService(repo).change_status("t1", TenantStatus.ACTIVE)
    repo.update.assert_not_awaited()


async def test_archived_tenant_cannot_change() -> None:
    repo = AsyncMock()
    repo.get_by_id.return_value = _row("archived")
    with pytest.raises(TenantStatusTransitionException):
        await TenantService(repo).change_status("t1", TenantStatus.ACTIVE)


async def test_change_status_unknown_tenant() -> None:
    repo = AsyncMock()
    repo.get_by_id.return_value = None
    with pytest.raises(TenantNotFoundException):
        await TenantService(repo).change_status("t1", TenantStatus.ACTIVE)


async def test_status_change_keeps_cache_until_commit() -> None:
    repo = AsyncMock()
    repo.get_by_id.return_value = _row()
    repo.update.side_effect = lambda obj: obj
    cache = MemoryCache()
    cache.data[tenant_key("t1")] = {"id": "t1", "status": "active"}
    after_commit = AfterCommit()
    service = TenantService(repo, cache=cache, after_commit=after_commit)

    await service.change_status("t1", TenantStatus.SUSPENDED)
    assert tenant_key("t1") in cache.data

    await after_commit.run()
    assert cache.data == {}
