"""Tenant repository (platform table, outside row-level security)."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from msls.domain.exceptions import TenantAlreadyExistsException
from msls.infrastructure.persistence.models.tenant import Tenant
from msls.infrastructure.persistence.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Tenant lookups by id or slug. Caching is the TenantService's concern."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        return await self.first_where(Tenant.slug == slug)

    async def get_by_id_or_slug(self, value: str) -> Tenant | None:
        """Resolve a route/header value that may be either the id or the slug."""
        tenant = await self.get_by_id(value)
        if tenant is None:
            tenant = await self.get_by_slug(value)
        return tenant

    async def create_tenant(self, slug: str, name: str) -> Tenant:
        """Insert a tenant; raises TenantAlreadyExistsException on duplicate slug."""
        if await self.get_by_slug(slug) is not None:
            raise TenantAlreadyExistsException(slug)
        try:
            return await self.create(Tenant(slug=slug, name=name))
        except IntegrityError as e:
            raise TenantAlreadyExistsException(slug) from e
