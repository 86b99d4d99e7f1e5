"""Route guards over the access policy evaluator.

Each guard takes the requested route and a NavigationContext and returns an
AccessDecision. Guards never raise: failures are denials with a redirect.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from msls.application.services.access_policy import (
    AccessDecision,
    AllFeaturesEnabled,
    AllPermissions,
    AllRoles,
    AnyFeatureEnabled,
    AnyPermission,
    AnyRole,
    Authenticated,
    Destination,
    FeatureEnabled,
    HasPermission,
    HasRole,
    Requirement,
    TenantActive,
    evaluate,
)
from msls.application.services.tenant_session import NavigationContext

logger = logging.getLogger(__name__)

TENANT_ROUTE_PARAM = "tenant_slug"


@dataclass(frozen=True)
class RouteRequest:
    """A navigation target: path plus its resolved route parameters."""

    path: str
    params: Mapping[str, str] = field(default_factory=dict)


Guard = Callable[[RouteRequest, NavigationContext], AccessDecision]


def _adopt_route_tenant(route: RouteRequest, nav: NavigationContext) -> AccessDecision | None:
    slug = route.params.get(TENANT_ROUTE_PARAM)
    if not slug:
        return None
    try:
        adopted = nav.tenants.adopt(slug, nav.directory)
    except Exception:
        logger.exception("Tenant lookup failed for route %s", route.path)
        return AccessDecision.deny(Destination.TENANT_SELECTION, reason="lookup_failed")
    if adopted is None:
        return AccessDecision.deny(Destination.TENANT_SELECTION, reason="unknown_tenant")
    return None


def tenant_guard(route: RouteRequest, nav: NavigationContext) -> AccessDecision:
    """Adopt the route's tenant, then require a tenant whose status is active."""
    denial = _adopt_route_tenant(route, nav)
    if denial is not None:
        return denial
    return evaluate([TenantActive()], nav.request_context())


def strict_tenant_guard(route: RouteRequest, nav: NavigationContext) -> AccessDecision:
    """Like tenant_guard, but the implicit default tenant does not count."""
    denial = _adopt_route_tenant(route, nav)
    if denial is not None:
        return denial
    return evaluate([TenantActive()], nav.request_context(strict=True))


def _tenant_then(requirement: Requirement) -> Guard:
    def guard(route: RouteRequest, nav: NavigationContext) -> AccessDecision:
        decision = tenant_guard(route, nav)
        if not decision.allowed:
            return decision
        return evaluate([requirement], nav.request_context())

    return guard


def tenant_feature_guard(feature: str) -> Guard:
    """Tenant guard plus: the tenant must have `feature` enabled."""
    return _tenant_then(FeatureEnabled(feature))


def any_feature_guard(*features: str) -> Guard:
    return _tenant_then(AnyFeatureEnabled(tuple(features)))


def all_features_guard(*features: str) -> Guard:
    return _tenant_then(AllFeaturesEnabled(tuple(features)))


def _session_guard(requirement: Requirement) -> Guard:
    def guard(route: RouteRequest, nav: NavigationContext) -> AccessDecision:
        return evaluate([requirement], nav.request_context())

    return guard


auth_guard: Guard = _session_guard(Authenticated())


def permission_guard(permission: str) -> Guard:
    return _session_guard(HasPermission(permission))


def any_permission_guard(*permissions: str) -> Guard:
    return _session_guard(AnyPermission(tuple(permissions)))


def all_permissions_guard(*permissions: str) -> Guard:
    return _session_guard(AllPermissions(tuple(permissions)))


def role_guard(role: str) -> Guard:
    return _session_guard(HasRole(role))


def any_role_guard(*roles: str) -> Guard:
    return _session_guard(AnyRole(tuple(roles)))


def all_roles_guard(*roles: str) -> Guard:
    return _session_guard(AllRoles(tuple(roles)))


def run_guards(guards: list[Guard], route: RouteRequest, nav: NavigationContext) -> AccessDecision:
    """Run guards in order and return the first denial (route-level composition)."""
    for guard in guards:
        decision = guard(route, nav)
        if not decision.allowed:
            return decision
    return AccessDecision.allow()
