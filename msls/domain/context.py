"""Explicit tenant, session and request context objects.

These immutable values replace ambient tenant/session state: they are built
once per request (or held by a session-scoped store) and passed to every
guard, service and tenant-scoped database session that needs them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from msls.domain.enums import TenantStatus
from msls.domain.exceptions import TenantRequiredException


@dataclass(frozen=True, slots=True)
class TenantContext:
    """One tenant binding: id, status and enabled feature keys."""

    tenant_id: str
    status: str = TenantStatus.ACTIVE.value
    features: frozenset[str] = field(default_factory=frozenset)
    slug: str | None = None
    name: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE.value

    def has_feature(self, key: str) -> bool:
        return key in self.features

    def with_features(self, features: set[str] | frozenset[str]) -> TenantContext:
        """Return a copy carrying the given enabled features."""
        return TenantContext(
            tenant_id=self.tenant_id,
            status=self.status,
            features=frozenset(features),
            slug=self.slug,
            name=self.name,
        )


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Authenticated principal: user, tenant and granted permissions/roles.

    An anonymous session has user_id None and empty grants.
    """

    user_id: str | None = None
    tenant_id: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)
    roles: frozenset[str] = field(default_factory=frozenset)
    email: str | None = None

    @classmethod
    def anonymous(cls) -> SessionContext:
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def has_any_permission(self, permissions: list[str] | tuple[str, ...]) -> bool:
        return any(p in self.permissions for p in permissions)

    def has_all_permissions(self, permissions: list[str] | tuple[str, ...]) -> bool:
        return all(p in self.permissions for p in permissions)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def has_any_role(self, roles: list[str] | tuple[str, ...]) -> bool:
        return any(r in self.roles for r in roles)

    def has_all_roles(self, roles: list[str] | tuple[str, ...]) -> bool:
        return all(r in self.roles for r in roles)


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Everything an operation needs to know about who is calling and for which tenant."""

    session: SessionContext = field(default_factory=SessionContext)
    tenant: TenantContext | None = None
    request_id: str | None = None

    @property
    def tenant_id(self) -> str | None:
        return self.tenant.tenant_id if self.tenant else None

    def require_tenant(self) -> TenantContext:
        """Return the bound tenant or raise TenantRequiredException."""
        if self.tenant is None:
            raise TenantRequiredException()
        return self.tenant
