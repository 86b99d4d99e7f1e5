"""Loads a user's permission and role codes (IPermissionResolver)."""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from msls.infrastructure.persistence.models.rbac import (
    Permission,
    Role,
    RolePermission,
    UserRole,
)


class PermissionResolver:
    """Runs on a tenant-bound session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _codes(self, stmt: Select) -> set[str]:
        return set((await self.db.scalars(stmt)).all())

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]:
        """Codes granted through any of the user's roles."""
        return await self._codes(
            select(Permission.code)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user_id, UserRole.tenant_id == tenant_id)
            .distinct()
        )

    async def get_user_roles(self, user_id: str, tenant_id: str) -> set[str]:
        return await self._codes(
            select(Role.code)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id, UserRole.tenant_id == tenant_id)
        )
