"""Session-scoped tenant and auth stores.

TenantStore and SessionStore are the only writers of client-side tenant and
session state; guards and views read them. One instance of each lives per
user session and is passed explicitly to whatever needs it.
"""

from __future__ import annotations

import logging
from typing import Protocol

from msls.domain.context import RequestContext, SessionContext, TenantContext

logger = logging.getLogger(__name__)

# Status given to a tenant adopted from a route without a directory to confirm it.
UNCONFIRMED_STATUS = "unknown"


class TenantDirectory(Protocol):
    """Lookup of tenants by slug or id (e.g. backed by GET /tenants/current)."""

    def lookup(self, slug_or_id: str) -> TenantContext | None: ...


class InMemoryTenantDirectory:
    """TenantDirectory over a fixed set of known tenants (matched by id or slug)."""

    def __init__(self, tenants: list[TenantContext] | None = None) -> None:
        self._tenants: dict[str, TenantContext] = {}
        for tenant in tenants or []:
            self.add(tenant)

    def add(self, tenant: TenantContext) -> None:
        self._tenants[tenant.tenant_id] = tenant
        if tenant.slug:
            self._tenants[tenant.slug] = tenant

    def lookup(self, slug_or_id: str) -> TenantContext | None:
        return self._tenants.get(slug_or_id)


class TenantStore:
    """Holds the current tenant for one session.

    An optional default tenant stands in when none has been set explicitly
    (single-school deployments); `explicit` ignores it.
    """

    def __init__(self, default: TenantContext | None = None) -> None:
        self._current: TenantContext | None = None
        self._default = default

    @property
    def current(self) -> TenantContext | None:
        return self._current if self._current is not None else self._default

    @property
    def explicit(self) -> TenantContext | None:
        return self._current

    def set_tenant(self, tenant: TenantContext) -> None:
        self._current = tenant

    def set_status(self, status: str) -> None:
        """Update the status of the explicitly set tenant (e.g. after a refresh)."""
        if self._current is None:
            return
        self._current = TenantContext(
            tenant_id=self._current.tenant_id,
            status=status,
            features=self._current.features,
            slug=self._current.slug,
            name=self._current.name,
        )

    def set_features(self, features: set[str] | frozenset[str]) -> None:
        if self._current is not None:
            self._current = self._current.with_features(features)

    def adopt(
        self, slug_or_id: str, directory: TenantDirectory | None = None
    ) -> TenantContext | None:
        """Make the tenant named by a route parameter current.

        Re-adopting the current tenant keeps its state. With a directory the
        tenant is looked up and unknown names are rejected (returns None and
        leaves the current tenant as it was). Without one the name is trusted and the
        tenant stays unconfirmed until set_tenant/set_status supply a status.
        """
        current = self._current
        if current is not None and slug_or_id in (current.tenant_id, current.slug):
            return current
        if directory is not None:
            found = directory.lookup(slug_or_id)
            if found is None:
                logger.info("Route tenant %r not found in directory", slug_or_id)
                return None
            self._current = found
            return found
        self._current = TenantContext(
            tenant_id=slug_or_id, status=UNCONFIRMED_STATUS, slug=slug_or_id
        )
        return self._current

    def clear(self) -> None:
        self._current = None


class SessionStore:
    """Holds the authenticated session; replaced at login, reset at logout."""

    def __init__(self) -> None:
        self._session = SessionContext.anonymous()

    @property
    def current(self) -> SessionContext:
        return self._session

    def login(self, session: SessionContext) -> None:
        self._session = session

    def logout(self) -> None:
        self._session = SessionContext.anonymous()


class NavigationContext:
    """Collaborators a route guard reads: tenant store, session store, directory."""

    def __init__(
        self,
        tenants: TenantStore,
        sessions: SessionStore | None = None,
        directory: TenantDirectory | None = None,
    ) -> None:
        self.tenants = tenants
        self.sessions = sessions or SessionStore()
        self.directory = directory

    def request_context(self, *, strict: bool = False) -> RequestContext:
        """Snapshot of the current state; strict ignores the default tenant."""
        tenant = self.tenants.explicit if strict else self.tenants.current
        return RequestContext(session=self.sessions.current, tenant=tenant)
