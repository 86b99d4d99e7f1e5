"""Auth API: login, token refresh and current session."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from msls.api.v1.dependencies import (
    get_authenticated_session,
    get_cache,
    get_tenant_service,
    get_token_service,
    tenant_auth_service,
)
from msls.application.services.auth_service import INVALID_CREDENTIALS, decode_refresh_token
from msls.application.services.tenant_service import TenantService
from msls.core.limiter import limit_auth, limit_refresh
from msls.domain.context import SessionContext
from msls.domain.exceptions import AuthenticationException, TenantNotFoundException
from msls.infrastructure.cache.redis_cache import CacheService
from msls.infrastructure.security.jwt import TokenService
from msls.schemas.auth import LoginRequest, MeResponse, RefreshRequest, TokenResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    tenants: Annotated[TenantService, Depends(get_tenant_service)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> TokenResponse:
    """Authenticate with tenant_slug, email and password; return a token pair.

    Unknown schools answer like bad credentials (401); suspended or
    archived schools answer 403 TENANT_UNAVAILABLE.
    """
    try:
        tenant = await tenants.require_active(body.tenant_slug)
    except TenantNotFoundException:
        raise AuthenticationException(INVALID_CREDENTIALS) from None
    async with tenant_auth_service(tenant, tokens, cache) as auth:
        pair = await auth.login(tenant, body.email, body.password)
    return TokenResponse(**asdict(pair))


@router.post("/refresh", response_model=TokenResponse)
@limit_refresh
async def refresh(
    request: Request,
    body: RefreshRequest,
    tenants: Annotated[TenantService, Depends(get_tenant_service)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    cache: Annotated[CacheService | None, Depends(get_cache)],
) -> TokenResponse:
    """Exchange a refresh token for a new pair; permissions are reloaded."""
    user_id, tenant_id = decode_refresh_token(tokens, body.refresh_token)
    try:
        tenant = await tenants.require_active(tenant_id)
    except TenantNotFoundException:
        raise AuthenticationException("Invalid token") from None
    async with tenant_auth_service(tenant, tokens, cache) as auth:
        pair = await auth.refresh(tenant, user_id)
    return TokenResponse(**asdict(pair))


@router.get("/me", response_model=MeResponse)
async def get_me(
    session: Annotated[SessionContext, Depends(get_authenticated_session)],
) -> MeResponse:
    return MeResponse(
        user_id=session.user_id or "",
        tenant_id=session.tenant_id or "",
        permissions=sorted(session.permissions),
        roles=sorted(session.roles),
    )
