"""Unit tests for domain exceptions, tenant entity/slug and context objects."""

import pytest

from msls.domain.context import RequestContext, SessionContext, TenantContext
from msls.domain.enums import TenantStatus
from msls.domain.exceptions import (
    AuthorizationException,
    MslsException,
    TenantRequiredException,
    TenantStatusTransitionException,
    TenantUnavailableException,
    ValidationException,
)
from msls.domain.tenant import TenantEntity, TenantSlug


def test_exception_to_dict() -> None:
    exc = TenantUnavailableException("t1", "suspended")
    assert isinstance(exc, MslsException)
    assert exc.to_dict() == {
        "error": "TENANT_UNAVAILABLE",
        "message": "Tenant is not available: suspended",
        "details": {"tenant_id": "t1", "reason": "suspended"},
    }


def test_error_code_defaults_to_class_name() -> None:
    assert MslsException("boom").error_code == "MslsException"


def test_authorization_exception_lists_requirements() -> None:
    assert AuthorizationException(["students:read"]).details == {"required": ["students:read"]}
    assert AuthorizationException().details == {}


def test_validation_exception_field() -> None:
    assert ValidationException("bad", field="slug").details == {"field": "slug"}


@pytest.mark.parametrize("slug", ["abc", "greenwood-high", "school-42"])
def test_valid_slugs(slug: str) -> None:
    assert TenantSlug(slug).value == slug


@pytest.mark.parametrize("slug", ["", "ab", "Greenwood", "-lead", "trail-", "two--dashes", "a" * 65])
def test_invalid_slugs(slug: str) -> None:
    with pytest.raises(ValidationException):
        TenantSlug(slug)


def _entity(status: TenantStatus) -> TenantEntity:
    return TenantEntity(id="t1", slug=TenantSlug("greenwood"), name="Greenwood", status=status)


def test_tenant_lifecycle() -> None:
    tenant = _entity(TenantStatus.ACTIVE)
    assert tenant.accepts_traffic()
    tenant.change_status(TenantStatus.SUSPENDED)
    assert not tenant.accepts_traffic()
    tenant.change_status(TenantStatus.ACTIVE)
    tenant.change_status(TenantStatus.ARCHIVED)
    tenant.change_status(TenantStatus.ARCHIVED)
    with pytest.raises(TenantStatusTransitionException):
        tenant.change_status(TenantStatus.ACTIVE)


def test_tenant_requires_name() -> None:
    with pytest.raises(ValidationException):
        TenantEntity(id="t1", slug=TenantSlug("greenwood"), name="  ", status=TenantStatus.ACTIVE)


def test_tenant_context_features_and_status() -> None:
    tenant = TenantContext(tenant_id="t1")
    assert tenant.is_active
    with_features = tenant.with_features({"ai_insights"})
    assert with_features.has_feature("ai_insights")
    assert not tenant.has_feature("ai_insights")
    assert not TenantContext(tenant_id="t1", status="archived").is_active


def test_session_context_grants() -> None:
    session = SessionContext(
        user_id="u1", permissions=frozenset({"a", "b"}), roles=frozenset({"admin"})
    )
    assert session.is_authenticated
    assert session.has_all_permissions(["a", "b"])
    assert not session.has_all_permissions(["a", "c"])
    assert session.has_any_permission(("c", "a"))
    assert session.has_any_role(["admin"]) and session.has_all_roles(["admin"])
    assert not SessionContext.anonymous().is_authenticated


def test_request_context_require_tenant() -> None:
    assert RequestContext().tenant_id is None
    with pytest.raises(TenantRequiredException):
        RequestContext().require_tenant()
    tenant = TenantContext(tenant_id="t1")
    assert RequestContext(tenant=tenant).require_tenant() is tenant
