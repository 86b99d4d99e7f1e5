"""Unit tests for feature flag resolution (user > tenant > default) and the service."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from msls.application.services.after_commit import AfterCommit
from msls.application.services.feature_flag_service import (
    FeatureFlagService,
    resolve_flag_states,
    validate_flag_key,
)
from msls.core.cache_keys import feature_key
from msls.domain.enums import FlagSource
from msls.domain.exceptions import (
    DuplicateRecordException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.conftest import MemoryCache


@dataclass
class Flag:
    key: str
    name: str = "Flag"
    description: str | None = None
    default_value: bool = False
    flag_metadata: dict[str, Any] | None = None


@dataclass
class Override:
    enabled: bool
    custom_value: dict[str, Any] | None = None


@dataclass
class MemoryFlagStore:
    flags: dict[str, Flag] = field(default_factory=dict)
    tenant: dict[str, dict[str, Override]] = field(default_factory=dict)
    user: dict[tuple[str, str], dict[str, Override]] = field(default_factory=dict)
    list_calls: int = 0

    async def list_flags(self) -> list[Flag]:
        self.list_calls += 1
        return sorted(self.flags.values(), key=lambda f: f.key)

    async def get_by_key(self, key: str) -> Flag | None:
        return self.flags.get(key)

    async def create(self, obj: Flag) -> Flag:
        self.flags[obj.key] = obj
        return obj

    async def tenant_overrides(self, tenant_id: str) -> dict[str, Override]:
        return dict(self.tenant.get(tenant_id, {}))

    async def user_overrides(self, tenant_id: str, user_id: str) -> dict[str, Override]:
        return dict(self.user.get((tenant_id, user_id), {}))

    async def upsert_tenant_override(self, tenant_id, flag, enabled, custom_value=None):
        override = Override(enabled, custom_value)
        self.tenant.setdefault(tenant_id, {})[flag.key] = override
        return override

    async def upsert_user_override(self, tenant_id, user_id, flag, enabled, custom_value=None):
        override = Override(enabled, custom_value)
        self.user.setdefault((tenant_id, user_id), {})[flag.key] = override
        return override

    async def delete_tenant_override(self, tenant_id: str, flag: Flag) -> bool:
        return self.tenant.get(tenant_id, {}).pop(flag.key, None) is not None


@pytest.fixture
def store() -> MemoryFlagStore:
    return MemoryFlagStore(
        flags={
            "online_admissions": Flag("online_admissions"),
            "ai_insights": Flag("ai_insights", default_value=True),
        }
    )


def test_resolution_priority_user_over_tenant_over_default() -> None:
    flags = [Flag("a"), Flag("b", default_value=True), Flag("c")]
    states = {
        s.key: s
        for s in resolve_flag_states(
            flags,
            tenant_overrides={"a": Override(True), "b": Override(False)},
            user_overrides={"a": Override(False, {"beta": True})},
        )
    }
    assert (states["a"].enabled, states["a"].source) == (False, FlagSource.USER)
    assert states["a"].custom_value == {"beta": True}
    assert (states["b"].enabled, states["b"].source) == (False, FlagSource.TENANT)
    assert (states["c"].enabled, states["c"].source) == (False, FlagSource.DEFAULT)


@pytest.mark.parametrize("key", ["online_admissions", "a1", "x"])
def test_valid_flag_keys(key: str) -> None:
    validate_flag_key(key)


@pytest.mark.parametrize("key", ["", "Online", "1abc", "with-dash", "a" * 101])
def test_invalid_flag_keys(key: str) -> None:
    with pytest.raises(ValidationException):
        validate_flag_key(key)


async def test_enabled_keys_and_unknown_key_disabled(store: MemoryFlagStore) -> None:
    service = FeatureFlagService(store)
    assert await service.enabled_keys("t1") == frozenset({"ai_insights"})
    assert await service.is_enabled("does_not_exist", "t1") is False


async def test_tenant_override_enables_flag_and_invalidates_cache(store: MemoryFlagStore) -> None:
    cache = MemoryCache()
    service = FeatureFlagService(store, cache=cache)
    assert not await service.is_enabled("online_admissions", "t1")
    state = await service.set_tenant_override("t1", "online_admissions", True, {"max": 5})
    assert state.enabled and state.source is FlagSource.TENANT
    assert state.custom_value == {"max": 5}
    assert await service.is_enabled("online_admissions", "t1")
    assert not await service.is_enabled("online_admissions", "t2")


async def test_user_override_beats_tenant(store: MemoryFlagStore) -> None:
    service = FeatureFlagService(store, cache=MemoryCache())
    await service.set_tenant_override("t1", "online_admissions", True)
    state = await service.set_user_override("t1", "u1", "online_admissions", False)
    assert state.source is FlagSource.USER
    assert not await service.is_enabled("online_admissions", "t1", "u1")
    assert await service.is_enabled("online_admissions", "t1", "u2")


async def test_states_are_served_from_cache(store: MemoryFlagStore) -> None:
    cache = MemoryCache()
    service = FeatureFlagService(store, cache=cache)
    first = await service.get_states("t1")
    second = await service.get_states("t1")
    assert first == second
    assert store.list_calls == 1


async def test_unavailable_cache_is_bypassed(store: MemoryFlagStore) -> None:
    service = FeatureFlagService(store, cache=MemoryCache(available=False))
    await service.get_states("t1")
    await service.get_states("t1")
    assert store.list_calls == 2


async def test_remove_tenant_override(store: MemoryFlagStore) -> None:
    service = FeatureFlagService(store, cache=MemoryCache())
    await service.set_tenant_override("t1", "ai_insights", False)
    assert not await service.is_enabled("ai_insights", "t1")
    assert await service.remove_tenant_override("t1", "ai_insights") is True
    assert await service.is_enabled("ai_insights", "t1")


async def test_override_of_unknown_flag_is_not_found(store: MemoryFlagStore) -> None:
    service = FeatureFlagService(store)
    with pytest.raises(ResourceNotFoundException):
        await service.set_tenant_override("t1", "nope", True)


async def test_create_flag(store: MemoryFlagStore) -> None:
    cache = MemoryCache()
    service = FeatureFlagService(store, cache=cache, flag_factory=Flag)
    await service.get_states("t1")
    await service.create_flag("parent_messaging", "Parent messaging", default_value=True)
    assert await service.is_enabled("parent_messaging", "t1")
    with pytest.raises(DuplicateRecordException):
        await service.create_flag("parent_messaging", "Again")


async def test_override_write_does_not_cache_uncommitted_state(store: MemoryFlagStore) -> None:
    cache = MemoryCache()
    after_commit = AfterCommit()
    service = FeatureFlagService(store, cache=cache, after_commit=after_commit)
    state = await service.set_tenant_override("t1", "online_admissions", True)
    assert state.enabled
    assert cache.data == {}
    # Rolled back: the queued invalidation is dropped and nothing was cached.
    after_commit.discard()
    assert cache.data == {}


async def test_invalidation_waits_for_commit(store: MemoryFlagStore) -> None:
    cache = MemoryCache()
    reader = FeatureFlagService(store, cache=cache)
    await reader.get_states("t1")
    await reader.get_states("t1", "u1")
    after_commit = AfterCommit()
    writer = FeatureFlagService(store, cache=cache, after_commit=after_commit)
    await writer.set_tenant_override("t1", "online_admissions", True)
    assert feature_key("t1", None) in cache.data
    assert len(after_commit) == 1
    await after_commit.run()
    assert feature_key("t1", None) not in cache.data
    assert feature_key("t1", "u1") not in cache.data
    assert await reader.is_enabled("online_admissions", "t1")
