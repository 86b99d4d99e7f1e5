"""Unit tests for tenant-scoped session binding (no database needed).

A tenant session must refuse missing, malformed or inactive tenants before
any statement runs, and otherwise set app.tenant_id with a bound parameter.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from msls.domain.context import TenantContext
from msls.domain.exceptions import (
    InvalidTenantIdException,
    TenantRequiredException,
    TenantUnavailableException,
)
from msls.infrastructure.persistence.database import (
    RLS_TENANT_SETTING,
    bind_tenant,
    open_tenant_session,
    require_tenant_binding,
)


def _factory() -> tuple[MagicMock, AsyncMock]:
    """Session factory whose sessions record execute calls."""
    session = AsyncMock()
    session.__aenter__.return_value = session
    transaction = AsyncMock()
    session.begin = MagicMock(return_value=transaction)
    factory = MagicMock(return_value=session)
    return factory, session


@pytest.mark.parametrize(
    ("tenant", "exc_type"),
    [
        (None, TenantRequiredException),
        (TenantContext(tenant_id=""), TenantRequiredException),
        (TenantContext(tenant_id="bad id; DROP TABLE"), InvalidTenantIdException),
        (TenantContext(tenant_id="t" * 65), InvalidTenantIdException),
        (TenantContext(tenant_id="t1", status="suspended"), TenantUnavailableException),
        (TenantContext(tenant_id="t1", status="archived"), TenantUnavailableException),
    ],
)
async def test_open_tenant_session_refuses_before_any_statement(
    tenant: TenantContext | None, exc_type: type
) -> None:
    factory, session = _factory()
    with pytest.raises(exc_type):
        async with open_tenant_session(tenant, session_factory=factory):
            pass
    factory.assert_not_called()
    session.execute.assert_not_awaited()


async def test_open_tenant_session_sets_tenant_setting() -> None:
    factory, session = _factory()
    tenant = TenantContext(tenant_id="school_1")
    async with open_tenant_session(tenant, session_factory=factory) as db:
        assert db is session
    session.begin.assert_called_once()
    statement, params = session.execute.await_args.args
    assert "set_config" in str(statement)
    assert params == {"name": RLS_TENANT_SETTING, "value": "school_1"}


async def test_bind_tenant_refuses_inactive_tenant() -> None:
    session = AsyncMock()
    with pytest.raises(TenantUnavailableException):
        await bind_tenant(session, TenantContext(tenant_id="t1", status="inactive"))
    session.execute.assert_not_awaited()


def test_require_tenant_binding_returns_id() -> None:
    assert require_tenant_binding(TenantContext(tenant_id="abc-123")) == "abc-123"
