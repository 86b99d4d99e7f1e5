"""Session dependencies: bearer token -> SessionContext, plus the platform secret check."""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from msls.application.services.auth_service import session_from_token
from msls.core.config import get_settings
from msls.domain.context import SessionContext
from msls.domain.exceptions import AuthenticationException
from msls.infrastructure.security.jwt import TokenService

from .common import get_token_service

_http_bearer = HTTPBearer(auto_error=False)


async def get_session_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> SessionContext:
    """Anonymous session without a bearer token; 401 for a bad token.

    Grants come from the access token claims (refreshed on /auth/refresh).
    """
    if credentials is None:
        return SessionContext.anonymous()
    return session_from_token(tokens, credentials.credentials)


async def get_authenticated_session(
    session: Annotated[SessionContext, Depends(get_session_context)],
) -> SessionContext:
    if not session.is_authenticated:
        raise AuthenticationException("Not authenticated")
    return session


PLATFORM_SECRET_HEADER = "X-Platform-Secret"


async def require_platform_secret(request: Request) -> None:
    """Platform operations (tenant create / status) need APP_PLATFORM_SECRET in the header.

    Raises:
        HTTPException 503: Secret not configured.
        AuthenticationException: Header missing or wrong.
    """
    expected = get_settings().app.platform_secret.get_secret_value()
    if not expected:
        raise HTTPException(
            status_code=503,
            detail="Platform operations are not configured (APP_PLATFORM_SECRET is not set).",
        )
    supplied = request.headers.get(PLATFORM_SECRET_HEADER) or ""
    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        raise AuthenticationException("Invalid platform secret")
