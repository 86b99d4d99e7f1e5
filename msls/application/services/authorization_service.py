"""Authorization service: resolves a user's grants (permissions + roles) with optional caching."""

from __future__ import annotations

from msls.application.interfaces import ICacheService, IPermissionResolver
from msls.domain.context import SessionContext
from msls.core.cache_keys import permission_key, permission_tenant_pattern


class AuthorizationService:
    """Builds SessionContext grants; uses cache when available (5 min TTL typical)."""

    def __init__(
        self,
        permission_resolver: IPermissionResolver,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self.permission_resolver = permission_resolver
        self.cache = cache
        self.cache_ttl = cache_ttl

    def _cache_ready(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def get_grants(self, user_id: str, tenant_id: str) -> tuple[set[str], set[str]]:
        """Return (permission codes, role codes) for the user in the tenant."""
        key = permission_key(tenant_id, user_id)
        if self._cache_ready():
            cached = await self.cache.get(key)  # type: ignore[union-attr]
            if isinstance(cached, dict):
                return set(cached.get("permissions", [])), set(cached.get("roles", []))

        permissions = await self.permission_resolver.get_user_permissions(user_id, tenant_id)
        roles = await self.permission_resolver.get_user_roles(user_id, tenant_id)
        if self._cache_ready():
            await self.cache.set(  # type: ignore[union-attr]
                key,
                {"permissions": sorted(permissions), "roles": sorted(roles)},
                ttl=self.cache_ttl,
            )
        return permissions, roles

    async def build_session(
        self, user_id: str, tenant_id: str, email: str | None = None
    ) -> SessionContext:
        permissions, roles = await self.get_grants(user_id, tenant_id)
        return SessionContext(
            user_id=user_id,
            tenant_id=tenant_id,
            permissions=frozenset(permissions),
            roles=frozenset(roles),
            email=email,
        )

    async def invalidate_user_cache(self, user_id: str, tenant_id: str) -> None:
        """Invalidate cached grants for one user."""
        if self._cache_ready():
            await self.cache.delete(permission_key(tenant_id, user_id))  # type: ignore[union-attr]

    async def invalidate_tenant_cache(self, tenant_id: str) -> None:
        """Invalidate all cached grants for a tenant."""
        if self._cache_ready():
            await self.cache.delete_pattern(permission_tenant_pattern(tenant_id))  # type: ignore[union-attr]
