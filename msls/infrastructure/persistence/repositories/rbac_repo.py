"""Role/permission repository: default role seeding and role lookups."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from msls.infrastructure.persistence.models.rbac import (
    Permission,
    Role,
    RolePermission,
    UserRole,
)


class RbacRepository:
    """Tenant-scoped RBAC writes and reads (session bound by open_tenant_session)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_role_by_code(self, tenant_id: str, code: str) -> Role | None:
        result = await self.db.execute(
            select(Role).where(Role.tenant_id == tenant_id, Role.code == code)
        )
        return result.scalar_one_or_none()

    async def seed_roles(
        self,
        tenant_id: str,
        permissions: dict[str, str],
        roles: dict[str, tuple[str, list[str]]],
    ) -> dict[str, Role]:
        """Create permissions and system roles for a new tenant; returns roles by code."""
        perm_rows: dict[str, Permission] = {}
        for code, description in permissions.items():
            perm = Permission(tenant_id=tenant_id, code=code, description=description)
            self.db.add(perm)
            perm_rows[code] = perm
        await self.db.flush()
        created: dict[str, Role] = {}
        for code, (name, perm_codes) in roles.items():
            role = Role(tenant_id=tenant_id, code=code, name=name, is_system=True)
            self.db.add(role)
            await self.db.flush()
            for perm_code in perm_codes:
                self.db.add(
                    RolePermission(
                        tenant_id=tenant_id,
                        role_id=role.id,
                        permission_id=perm_rows[perm_code].id,
                    )
                )
            created[code] = role
        await self.db.flush()
        return created

    async def assign_role(self, tenant_id: str, user_id: str, role: Role) -> UserRole:
        assignment = UserRole(tenant_id=tenant_id, user_id=user_id, role_id=role.id)
        self.db.add(assignment)
        await self.db.flush()
        return assignment
