"""Authorization policy evaluator.

Takes a list of requirements and a request context and returns an
AccessDecision: allow, or deny with a destination and parameters. Has no
dependency on a routing framework; route guards and API dependencies both
build on it.

Requirements are evaluated in order; the first unmet one decides the denial.
Permission and role checks use exact string matching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from urllib.parse import urlencode

from msls.domain.context import RequestContext
from msls.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    FeatureUnavailableException,
    MslsException,
    TenantRequiredException,
    TenantUnavailableException,
)


class Destination(str, Enum):
    """Where a denied navigation is sent."""

    TENANT_SELECTION = "tenant_selection"
    TENANT_UNAVAILABLE = "tenant_unavailable"
    FEATURE_UNAVAILABLE = "feature_unavailable"
    ACCESS_DENIED = "access_denied"
    LOGIN = "login"


DEFAULT_DESTINATION_PATHS: dict[Destination, str] = {
    Destination.TENANT_SELECTION: "/select-tenant",
    Destination.TENANT_UNAVAILABLE: "/tenant-unavailable",
    Destination.FEATURE_UNAVAILABLE: "/feature-unavailable",
    Destination.ACCESS_DENIED: "/access-denied",
    Destination.LOGIN: "/login",
}


@dataclass(frozen=True)
class AccessDecision:
    """Result of a policy evaluation."""

    allowed: bool
    destination: Destination | None = None
    params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def allow(cls) -> AccessDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, destination: Destination, **params: str) -> AccessDecision:
        return cls(allowed=False, destination=destination, params=dict(params))

    @property
    def reason(self) -> str | None:
        return self.params.get("reason")

    def redirect_url(
        self, paths: dict[Destination, str] | None = None
    ) -> str | None:
        """Return the redirect target (path plus query) for a denial, None when allowed."""
        if self.allowed or self.destination is None:
            return None
        path = (paths or DEFAULT_DESTINATION_PATHS)[self.destination]
        if not self.params:
            return path
        return f"{path}?{urlencode(self.params)}"

    def to_exception(self, ctx: RequestContext) -> MslsException | None:
        """Map a denial to the domain exception the HTTP layer reports."""
        if self.allowed:
            return None
        if self.destination is Destination.LOGIN:
            return AuthenticationException("Not authenticated")
        if self.destination is Destination.TENANT_SELECTION:
            return TenantRequiredException()
        if self.destination is Destination.TENANT_UNAVAILABLE:
            return TenantUnavailableException(
                ctx.tenant_id or "", self.params.get("reason", "unknown")
            )
        if self.destination is Destination.FEATURE_UNAVAILABLE:
            names = self.params.get("feature") or self.params.get("features", "")
            return FeatureUnavailableException(
                [n for n in names.split(",") if n],
                reason=self.params.get("reason", "disabled"),
            )
        required = self.params.get("required", "")
        return AuthorizationException([r for r in required.split(",") if r])

    def raise_for_denial(self, ctx: RequestContext) -> None:
        exc = self.to_exception(ctx)
        if exc is not None:
            raise exc


class Requirement(Protocol):
    """A single capability check; returns None when met, a denial otherwise."""

    def check(self, ctx: RequestContext) -> AccessDecision | None: ...


@dataclass(frozen=True)
class Authenticated:
    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.session.is_authenticated:
            return None
        return AccessDecision.deny(Destination.LOGIN)


@dataclass(frozen=True)
class TenantSelected:
    """A tenant must be bound to the context (status not considered)."""

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.tenant is not None:
            return None
        return AccessDecision.deny(Destination.TENANT_SELECTION)


@dataclass(frozen=True)
class TenantActive:
    """A tenant must be bound and its status must be active."""

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.tenant is None:
            return AccessDecision.deny(Destination.TENANT_SELECTION)
        if not ctx.tenant.is_active:
            return AccessDecision.deny(
                Destination.TENANT_UNAVAILABLE, reason=ctx.tenant.status
            )
        return None


@dataclass(frozen=True)
class FeatureEnabled:
    name: str

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.tenant is not None and ctx.tenant.has_feature(self.name):
            return None
        return AccessDecision.deny(
            Destination.FEATURE_UNAVAILABLE, feature=self.name, reason="disabled"
        )


@dataclass(frozen=True)
class AnyFeatureEnabled:
    names: tuple[str, ...]

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.tenant is not None and any(ctx.tenant.has_feature(n) for n in self.names):
            return None
        return AccessDecision.deny(
            Destination.FEATURE_UNAVAILABLE,
            features=",".join(self.names),
            reason="all_disabled",
        )


@dataclass(frozen=True)
class AllFeaturesEnabled:
    names: tuple[str, ...]

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        enabled = ctx.tenant.features if ctx.tenant is not None else frozenset()
        missing = [n for n in self.names if n not in enabled]
        if not missing:
            return None
        return AccessDecision.deny(
            Destination.FEATURE_UNAVAILABLE,
            features=",".join(missing),
            reason="some_disabled",
        )


@dataclass(frozen=True)
class HasPermission:
    permission: str

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.session.has_permission(self.permission):
            return None
        return AccessDecision.deny(Destination.ACCESS_DENIED, required=self.permission)


@dataclass(frozen=True)
class AnyPermission:
    permissions: tuple[str, ...]

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.session.has_any_permission(self.permissions):
            return None
        return AccessDecision.deny(
            Destination.ACCESS_DENIED, required=",".join(self.permissions)
        )


@dataclass(frozen=True)
class AllPermissions:
    permissions: tuple[str, ...]

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        missing = [p for p in self.permissions if not ctx.session.has_permission(p)]
        if not missing:
            return None
        return AccessDecision.deny(Destination.ACCESS_DENIED, required=",".join(missing))


@dataclass(frozen=True)
class HasRole:
    role: str

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.session.has_role(self.role):
            return None
        return AccessDecision.deny(Destination.ACCESS_DENIED, required=self.role)


@dataclass(frozen=True)
class AnyRole:
    roles: tuple[str, ...]

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        if ctx.session.has_any_role(self.roles):
            return None
        return AccessDecision.deny(Destination.ACCESS_DENIED, required=",".join(self.roles))


@dataclass(frozen=True)
class AllRoles:
    roles: tuple[str, ...]

    def check(self, ctx: RequestContext) -> AccessDecision | None:
        missing = [r for r in self.roles if not ctx.session.has_role(r)]
        if not missing:
            return None
        return AccessDecision.deny(Destination.ACCESS_DENIED, required=",".join(missing))


def evaluate(requirements: list[Requirement], ctx: RequestContext) -> AccessDecision:
    """Return the first denial among requirements, or allow when all are met."""
    for requirement in requirements:
        decision = requirement.check(ctx)
        if decision is not None:
            return decision
    return AccessDecision.allow()
