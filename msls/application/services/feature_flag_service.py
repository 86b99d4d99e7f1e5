"""Feature flag resolution and management.

A flag resolves, for one tenant and optionally one user, in priority order:
user override > tenant override > flag default. Unknown keys are disabled.
Resolved maps are cached per tenant (and per user) and invalidated whenever
an override for the tenant changes. Writes hand the invalidation to an
AfterCommit queue when one is given, and answer from the store without
caching, so uncommitted state never reaches the cache.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from msls.application.interfaces import ICacheService
from msls.application.services.after_commit import AfterCommit, run_or_defer
from msls.core.cache_keys import feature_all_pattern, feature_key, feature_tenant_pattern
from msls.domain.enums import FlagSource
from msls.domain.exceptions import (
    DuplicateRecordException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

FLAG_KEY_RE = re.compile(r"^[a-z][a-z0-9_]*$")
FLAG_KEY_MAX_LENGTH = 100


def validate_flag_key(key: str) -> None:
    """Raise ValidationException unless key is lowercase snake_case starting with a letter."""
    if not key or len(key) > FLAG_KEY_MAX_LENGTH or not FLAG_KEY_RE.fullmatch(key):
        raise ValidationException(
            "Flag key must start with a letter and contain only lowercase letters, digits and underscores",
            field="key",
        )


@dataclass(frozen=True)
class FeatureFlagState:
    """A flag as seen by one tenant/user."""

    key: str
    name: str
    description: str | None
    enabled: bool
    custom_value: dict[str, Any] | None
    source: FlagSource


class _FlagDefinition(Protocol):
    key: str
    name: str
    description: str | None
    default_value: bool


class _FlagOverride(Protocol):
    enabled: bool
    custom_value: dict[str, Any] | None


def resolve_flag_states(
    flags: list[_FlagDefinition],
    tenant_overrides: dict[str, _FlagOverride],
    user_overrides: dict[str, _FlagOverride] | None = None,
) -> list[FeatureFlagState]:
    """Resolve every flag: user override wins, then tenant override, then default."""
    user_overrides = user_overrides or {}
    states: list[FeatureFlagState] = []
    for flag in flags:
        override: _FlagOverride | None = None
        source = FlagSource.DEFAULT
        if flag.key in user_overrides:
            override, source = user_overrides[flag.key], FlagSource.USER
        elif flag.key in tenant_overrides:
            override, source = tenant_overrides[flag.key], FlagSource.TENANT
        states.append(
            FeatureFlagState(
                key=flag.key,
                name=flag.name,
                description=flag.description,
                enabled=override.enabled if override is not None else bool(flag.default_value),
                custom_value=override.custom_value if override is not None else None,
                source=source,
            )
        )
    return states


class FeatureFlagStore(Protocol):
    """Persistence port (implemented by FeatureFlagRepository)."""

    async def list_flags(self) -> list[Any]: ...

    async def get_by_key(self, key: str) -> Any | None: ...

    async def create(self, obj: Any) -> Any: ...

    async def tenant_overrides(self, tenant_id: str) -> dict[str, Any]: ...

    async def user_overrides(self, tenant_id: str, user_id: str) -> dict[str, Any]: ...

    async def upsert_tenant_override(
        self, tenant_id: str, flag: Any, enabled: bool, custom_value: dict[str, Any] | None = None
    ) -> Any: ...

    async def upsert_user_override(
        self,
        tenant_id: str,
        user_id: str,
        flag: Any,
        enabled: bool,
        custom_value: dict[str, Any] | None = None,
    ) -> Any: ...

    async def delete_tenant_override(self, tenant_id: str, flag: Any) -> bool: ...


def _state_to_cache(state: FeatureFlagState) -> dict[str, Any]:
    data = asdict(state)
    data["source"] = state.source.value
    return data


def _state_from_cache(data: dict[str, Any]) -> FeatureFlagState:
    return FeatureFlagState(**{**data, "source": FlagSource(data["source"])})


def _pick(key: str, states: list[FeatureFlagState]) -> FeatureFlagState:
    for state in states:
        if state.key == key:
            return state
    raise ResourceNotFoundException("feature_flag", key)


class FeatureFlagService:
    """Resolves and manages flags for tenants and users."""

    def __init__(
        self,
        store: FeatureFlagStore,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
        flag_factory: Any = None,
        after_commit: AfterCommit | None = None,
    ) -> None:
        """Initialize.

        Args:
            store: Flag persistence.
            cache: Optional cache for resolved maps.
            cache_ttl: Seconds resolved maps stay cached.
            flag_factory: Callable building a new flag row (e.g. the FeatureFlag model).
            after_commit: Queue run by the transaction owner once the write commits.
        """
        self.store = store
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.flag_factory = flag_factory
        self.after_commit = after_commit

    def _cache_ready(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def get_states(self, tenant_id: str, user_id: str | None = None) -> list[FeatureFlagState]:
        """Return resolved states for all flags (cached)."""
        key = feature_key(tenant_id, user_id)
        if self._cache_ready():
            cached = await self.cache.get(key)  # type: ignore[union-attr]
            if isinstance(cached, list):
                return [_state_from_cache(item) for item in cached]
        states = await self._load_states(tenant_id, user_id)
        if self._cache_ready():
            await self.cache.set(  # type: ignore[union-attr]
                key, [_state_to_cache(s) for s in states], ttl=self.cache_ttl
            )
        return states

    async def _load_states(
        self, tenant_id: str, user_id: str | None = None
    ) -> list[FeatureFlagState]:
        flags = await self.store.list_flags()
        tenant_overrides = await self.store.tenant_overrides(tenant_id)
        user_overrides = (
            await self.store.user_overrides(tenant_id, user_id) if user_id else {}
        )
        return resolve_flag_states(flags, tenant_overrides, user_overrides)

    async def enabled_keys(self, tenant_id: str, user_id: str | None = None) -> frozenset[str]:
        states = await self.get_states(tenant_id, user_id)
        return frozenset(s.key for s in states if s.enabled)

    async def is_enabled(self, key: str, tenant_id: str, user_id: str | None = None) -> bool:
        """Return whether key is enabled; unknown keys are disabled."""
        return key in await self.enabled_keys(tenant_id, user_id)

    async def get_state(self, key: str, tenant_id: str, user_id: str | None = None) -> FeatureFlagState:
        return _pick(key, await self.get_states(tenant_id, user_id))

    async def _written_state(
        self, key: str, tenant_id: str, user_id: str | None = None
    ) -> FeatureFlagState:
        """State read back from the write session; never cached."""
        return _pick(key, await self._load_states(tenant_id, user_id))

    async def _require_flag(self, key: str) -> Any:
        validate_flag_key(key)
        flag = await self.store.get_by_key(key)
        if flag is None:
            raise ResourceNotFoundException("feature_flag", key)
        return flag

    async def create_flag(
        self,
        key: str,
        name: str,
        description: str | None = None,
        default_value: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> Any:
        validate_flag_key(key)
        if self.flag_factory is None:
            raise ValueError("flag_factory is required to create flags")
        if await self.store.get_by_key(key) is not None:
            raise DuplicateRecordException("feature_flag", "key", key)
        flag = await self.store.create(
            self.flag_factory(
                key=key,
                name=name,
                description=description,
                default_value=default_value,
                flag_metadata=metadata,
            )
        )
        logger.info("Feature flag created: %s (default=%s)", key, default_value)
        await self.invalidate_all()
        return flag

    async def set_tenant_override(
        self,
        tenant_id: str,
        key: str,
        enabled: bool,
        custom_value: dict[str, Any] | None = None,
    ) -> FeatureFlagState:
        flag = await self._require_flag(key)
        await self.store.upsert_tenant_override(tenant_id, flag, enabled, custom_value)
        logger.info("Tenant %s feature %s set to %s", tenant_id, key, enabled)
        await self.invalidate(tenant_id)
        return await self._written_state(key, tenant_id)

    async def remove_tenant_override(self, tenant_id: str, key: str) -> bool:
        flag = await self._require_flag(key)
        removed = await self.store.delete_tenant_override(tenant_id, flag)
        await self.invalidate(tenant_id)
        return removed

    async def set_user_override(
        self,
        tenant_id: str,
        user_id: str,
        key: str,
        enabled: bool,
        custom_value: dict[str, Any] | None = None,
    ) -> FeatureFlagState:
        flag = await self._require_flag(key)
        await self.store.upsert_user_override(tenant_id, user_id, flag, enabled, custom_value)
        await self.invalidate(tenant_id)
        return await self._written_state(key, tenant_id, user_id)

    async def invalidate(self, tenant_id: str) -> None:
        """Drop cached maps for the tenant and all its users (after commit when queued)."""
        await run_or_defer(self.after_commit, lambda: self._drop(feature_tenant_pattern(tenant_id)))

    async def invalidate_all(self) -> None:
        await run_or_defer(self.after_commit, lambda: self._drop(feature_all_pattern()))

    async def _drop(self, pattern: str) -> None:
        if self._cache_ready():
            await self.cache.delete_pattern(pattern)  # type: ignore[union-attr]
