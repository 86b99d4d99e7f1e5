"""Tenant resolution, creation and lifecycle.

resolve() turns a header/route value (tenant id or slug) into a TenantContext,
caching hits and misses for a short TTL so unknown tenants do not hit the
database on every request. Writes clear those entries once their transaction
commits when an AfterCommit queue is supplied.
"""

from __future__ import annotations

import logging
from typing import Any

from msls.application.dtos.tenant import TenantCreationResult
from msls.application.interfaces import ICacheService, ITenantInitializer
from msls.application.services.after_commit import AfterCommit, run_or_defer
from msls.core.cache_keys import tenant_key
from msls.core.constants import TENANT_CACHE_MISS_MARKER
from msls.core.tenant_validation import is_valid_tenant_id_format
from msls.domain.context import TenantContext
from msls.domain.enums import TenantStatus
from msls.domain.exceptions import (
    InvalidTenantIdException,
    TenantNotFoundException,
    TenantUnavailableException,
)
from msls.domain.tenant import TenantEntity, TenantSlug

logger = logging.getLogger(__name__)


def tenant_to_context(tenant: Any) -> TenantContext:
    """Build a TenantContext (no features) from a tenant row."""
    return TenantContext(
        tenant_id=tenant.id,
        status=tenant.status,
        slug=tenant.slug,
        name=tenant.name,
    )


def _context_to_cache(ctx: TenantContext) -> dict[str, Any]:
    return {"id": ctx.tenant_id, "slug": ctx.slug, "name": ctx.name, "status": ctx.status}


def _context_from_cache(data: dict[str, Any]) -> TenantContext:
    return TenantContext(
        tenant_id=data["id"],
        status=data["status"],
        slug=data.get("slug"),
        name=data.get("name"),
    )


class TenantService:
    """Tenant lookups (cached), creation with RBAC seeding, and status changes."""

    def __init__(
        self,
        tenant_repo: Any,
        cache: ICacheService | None = None,
        cache_ttl: int = 60,
        initializer: ITenantInitializer | None = None,
        after_commit: AfterCommit | None = None,
    ) -> None:
        self.tenant_repo = tenant_repo
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.initializer = initializer
        self.after_commit = after_commit

    def _cache_ready(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def resolve(self, value: str) -> TenantContext:
        """Return the tenant for an id or slug.

        Raises:
            InvalidTenantIdException: Malformed value (checked before any lookup).
            TenantNotFoundException: No such tenant.
        """
        if not is_valid_tenant_id_format(value):
            raise InvalidTenantIdException()
        key = tenant_key(value)
        if self._cache_ready():
            cached = await self.cache.get(key)  # type: ignore[union-attr]
            if cached == TENANT_CACHE_MISS_MARKER:
                raise TenantNotFoundException(value)
            if isinstance(cached, dict):
                return _context_from_cache(cached)

        tenant = await self.tenant_repo.get_by_id_or_slug(value)
        if tenant is None:
            if self._cache_ready():
                await self.cache.set(key, TENANT_CACHE_MISS_MARKER, ttl=self.cache_ttl)  # type: ignore[union-attr]
            raise TenantNotFoundException(value)
        ctx = tenant_to_context(tenant)
        if self._cache_ready():
            await self.cache.set(key, _context_to_cache(ctx), ttl=self.cache_ttl)  # type: ignore[union-attr]
        return ctx

    async def require_active(self, value: str) -> TenantContext:
        """resolve(), then raise TenantUnavailableException unless the tenant is active."""
        ctx = await self.resolve(value)
        if not ctx.is_active:
            raise TenantUnavailableException(ctx.tenant_id, ctx.status)
        return ctx

    async def create_tenant(
        self,
        slug: str,
        name: str,
        admin_email: str | None = None,
        admin_password: str | None = None,
        admin_name: str | None = None,
    ) -> TenantCreationResult:
        """Create tenant, seed default roles, optionally create the admin user.

        Caller runs this in one transaction so a failure leaves no partial tenant.
        """
        TenantSlug(slug)
        tenant = await self.tenant_repo.create_tenant(slug=slug, name=name.strip())
        ctx = tenant_to_context(tenant)
        admin_user_id = None
        if self.initializer is not None:
            admin_user_id = await self.initializer.initialize(
                ctx,
                admin_email=admin_email,
                admin_password=admin_password,
                admin_name=admin_name,
            )
        await self._invalidate(ctx)
        logger.info("Tenant created: %s (%s)", ctx.slug, ctx.tenant_id)
        return TenantCreationResult(
            tenant_id=ctx.tenant_id,
            slug=tenant.slug,
            name=tenant.name,
            status=TenantStatus(tenant.status),
            admin_user_id=admin_user_id,
            admin_email=admin_email.lower() if admin_user_id and admin_email else None,
        )

    async def change_status(self, tenant_id: str, status: TenantStatus) -> TenantContext:
        """Apply a lifecycle transition; archived tenants cannot change.

        Raises:
            TenantNotFoundException: No such tenant.
            TenantStatusTransitionException: Leaving archived.
        """
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise TenantNotFoundException(tenant_id)
        entity = TenantEntity(
            id=tenant.id,
            slug=TenantSlug(tenant.slug),
            name=tenant.name,
            status=TenantStatus(tenant.status),
        )
        previous = entity.status
        entity.change_status(status)
        if entity.status != previous:
            tenant.status = entity.status.value
            tenant = await self.tenant_repo.update(tenant)
            logger.info(
                "Tenant %s status changed: %s -> %s",
                tenant_id,
                previous.value,
                entity.status.value,
            )
        ctx = tenant_to_context(tenant)
        await self._invalidate(ctx)
        return ctx

    async def _invalidate(self, ctx: TenantContext) -> None:
        keys = [tenant_key(v) for v in (ctx.tenant_id, ctx.slug) if v]
        await run_or_defer(self.after_commit, lambda: self._drop(keys))

    async def _drop(self, keys: list[str]) -> None:
        if not self._cache_ready():
            return
        for key in keys:
            await self.cache.delete(key)  # type: ignore[union-attr]
