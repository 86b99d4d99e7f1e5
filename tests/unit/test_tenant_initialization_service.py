"""Unit tests for TenantInitializationService (RLS binding, role seeding, admin user)."""

from unittest.mock import AsyncMock, MagicMock

from msls.core.constants import DEFAULT_PERMISSIONS, DEFAULT_ROLES
from msls.domain.context import TenantContext
from msls.infrastructure.security.password import verify_password
from msls.infrastructure.services.tenant_initialization_service import (
    ADMIN_ROLE_CODE,
    TenantInitializationService,
)

TENANT = TenantContext(tenant_id="t-new", slug="new-school")


def _service() -> tuple[TenantInitializationService, AsyncMock, list]:
    added: list = []

    def add(obj) -> None:
        obj.id = "admin-1"
        added.append(obj)

    db = AsyncMock()
    db.add = MagicMock(side_effect=add)
    service = TenantInitializationService(db)
    service.rbac = AsyncMock()
    service.rbac.seed_roles.return_value = {ADMIN_ROLE_CODE: MagicMock(id="role-admin")}
    return service, db, added


async def test_binds_tenant_before_seeding() -> None:
    service, db, _ = _service()
    result = await service.initialize(TENANT)
    assert result is None
    params = db.execute.await_args.args[1]
    assert params == {"name": "app.tenant_id", "value": "t-new"}
    service.rbac.seed_roles.assert_awaited_once_with("t-new", DEFAULT_PERMISSIONS, DEFAULT_ROLES)
    service.rbac.assign_role.assert_not_awaited()


async def test_creates_admin_with_hashed_password() -> None:
    service, _, added = _service()
    result = await service.initialize(
        TENANT, admin_email="Admin@School.EDU", admin_password="s3cret-pass", admin_name="Head"
    )
    assert result == "admin-1"
    (admin,) = added
    assert admin.email == "admin@school.edu"
    assert admin.full_name == "Head"
    assert admin.hashed_password != "s3cret-pass"
    assert verify_password("s3cret-pass", admin.hashed_password)
    role = service.rbac.seed_roles.return_value[ADMIN_ROLE_CODE]
    service.rbac.assign_role.assert_awaited_once_with("t-new", "admin-1", role)


def test_admin_role_has_every_permission() -> None:
    _, admin_permissions = DEFAULT_ROLES[ADMIN_ROLE_CODE]
    assert set(admin_permissions) == set(DEFAULT_PERMISSIONS)
    for _, (_, codes) in DEFAULT_ROLES.items():
        assert set(codes) <= set(DEFAULT_PERMISSIONS)
