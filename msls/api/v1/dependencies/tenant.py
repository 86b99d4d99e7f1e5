"""Tenant dependencies: resolve the request's tenant into an explicit RequestContext."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from msls.application.services.after_commit import AfterCommit
from msls.application.services.feature_flag_service import FeatureFlagService
from msls.application.services.tenant_service import TenantService
from msls.core.config import get_settings
from msls.core.tenant_validation import is_valid_tenant_id_format
from msls.domain.context import RequestContext, SessionContext, TenantContext
from msls.domain.exceptions import (
    InvalidTenantIdException,
    TenantMismatchException,
    TenantNotFoundException,
)
from msls.infrastructure.cache.redis_cache import CacheService
from msls.infrastructure.persistence.database import (
    get_db,
    open_tenant_session,
    platform_transaction,
)
from msls.infrastructure.persistence.models.feature_flag import FeatureFlag
from msls.infrastructure.persistence.repositories import (
    FeatureFlagRepository,
    TenantRepository,
)
from msls.infrastructure.services import TenantInitializationService

from .auth import get_session_context
from .common import feature_cache_ttl, get_cache, tenant_cache_ttl

logger = logging.getLogger(__name__)


async def get_tenant_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> TenantService:
    """Tenant lookups (read session, short-TTL cache)."""
    return TenantService(TenantRepository(db), cache=cache, cache_ttl=tenant_cache_ttl())


async def get_tenant_service_for_write(
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> AsyncIterator[TenantService]:
    """Tenant creation / status changes in one transaction (RBAC seeding included).

    Cached tenant entries are cleared only after the transaction commits.
    """
    after_commit = AfterCommit()
    async with platform_transaction() as db:
        yield TenantService(
            TenantRepository(db),
            cache=cache,
            cache_ttl=tenant_cache_ttl(),
            initializer=TenantInitializationService(db),
            after_commit=after_commit,
        )
    await after_commit.run()


async def get_feature_flag_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> FeatureFlagService:
    return FeatureFlagService(
        FeatureFlagRepository(db),
        cache=cache,
        cache_ttl=feature_cache_ttl(),
        flag_factory=FeatureFlag,
    )


async def get_feature_flag_service_for_write(
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> AsyncIterator[FeatureFlagService]:
    """Override writes; resolved maps are invalidated after commit."""
    after_commit = AfterCommit()
    async with platform_transaction() as db:
        yield FeatureFlagService(
            FeatureFlagRepository(db),
            cache=cache,
            cache_ttl=feature_cache_ttl(),
            flag_factory=FeatureFlag,
            after_commit=after_commit,
        )
    await after_commit.run()


async def get_tenant_context(
    request: Request,
    session: Annotated[SessionContext, Depends(get_session_context)],
    tenants: Annotated[TenantService, Depends(get_tenant_service)],
    flags: Annotated[FeatureFlagService, Depends(get_feature_flag_service)],
) -> TenantContext | None:
    """Resolve at most one tenant for the request.

    Sources: tenant header, token tenant_id claim, TENANT_DEFAULT_ID. A header
    that names a different tenant than the token is rejected (403). Returns
    None when no source names a tenant. Status is not checked here; routes
    require TenantActive through the access policy.
    """
    settings = get_settings()
    header = (request.headers.get(settings.tenant.header_name) or "").strip() or None
    claim = session.tenant_id

    if header is not None and not is_valid_tenant_id_format(header):
        raise InvalidTenantIdException()

    if header is not None and claim is not None and header != claim:
        try:
            resolved = await tenants.resolve(header)
        except TenantNotFoundException:
            raise TenantMismatchException() from None
        if resolved.tenant_id != claim:
            logger.warning(
                "Tenant mismatch: header %s, token tenant %s, user %s",
                header,
                claim,
                session.user_id,
            )
            raise TenantMismatchException()
        tenant = resolved
    else:
        value = header or claim or settings.tenant.default_id or None
        if value is None:
            return None
        tenant = await tenants.resolve(value)

    user_id = session.user_id if session.tenant_id == tenant.tenant_id else None
    features = await flags.enabled_keys(tenant.tenant_id, user_id)
    return tenant.with_features(features)


async def get_request_context(
    request: Request,
    session: Annotated[SessionContext, Depends(get_session_context)],
    tenant: Annotated[TenantContext | None, Depends(get_tenant_context)],
) -> RequestContext:
    """Explicit per-request context handed to policy checks and services."""
    request_id = getattr(request.state, "request_id", None)
    return RequestContext(session=session, tenant=tenant, request_id=request_id)


async def get_tenant_db(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> AsyncIterator[AsyncSession]:
    """Tenant-bound session (app.tenant_id set); refuses missing/invalid/inactive tenants."""
    async with open_tenant_session(ctx.tenant) as session:
        yield session
