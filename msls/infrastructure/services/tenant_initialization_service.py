"""New-tenant initialization: default permissions, roles and the admin user.

Runs on the same transaction that inserted the tenant row. The session is
bound to the new tenant first so row-level security accepts the inserts.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from msls.core.constants import DEFAULT_PERMISSIONS, DEFAULT_ROLES
from msls.domain.context import TenantContext
from msls.infrastructure.persistence.database import bind_tenant
from msls.infrastructure.persistence.models.user import User
from msls.infrastructure.persistence.repositories.rbac_repo import RbacRepository
from msls.infrastructure.security.password import get_password_hash

logger = logging.getLogger(__name__)

ADMIN_ROLE_CODE = "admin"


class TenantInitializationService:
    """Seeds RBAC and an optional admin user for a freshly created tenant."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.rbac = RbacRepository(db)

    async def initialize(
        self,
        tenant: TenantContext,
        admin_email: str | None = None,
        admin_password: str | None = None,
        admin_name: str | None = None,
    ) -> str | None:
        """Seed default roles; create the admin user when credentials are given.

        Returns:
            The admin user id, or None when no admin was requested.
        """
        await bind_tenant(self.db, tenant)
        roles = await self.rbac.seed_roles(tenant.tenant_id, DEFAULT_PERMISSIONS, DEFAULT_ROLES)
        logger.info(
            "Seeded %s roles and %s permissions for tenant %s",
            len(roles),
            len(DEFAULT_PERMISSIONS),
            tenant.tenant_id,
        )
        if not admin_email or not admin_password:
            return None

        hashed = await asyncio.to_thread(get_password_hash, admin_password)
        admin = User(
            tenant_id=tenant.tenant_id,
            email=admin_email.lower(),
            full_name=admin_name or "Administrator",
            hashed_password=hashed,
            is_active=True,
        )
        self.db.add(admin)
        await self.db.flush()
        await self.rbac.assign_role(tenant.tenant_id, admin.id, roles[ADMIN_ROLE_CODE])
        return admin.id
