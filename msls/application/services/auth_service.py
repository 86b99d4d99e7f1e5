"""Authentication: credential login, token refresh and token-to-session decoding."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from msls.application.dtos.auth import TokenPair
from msls.application.interfaces import ITokenService
from msls.application.services.authorization_service import AuthorizationService
from msls.domain.context import SessionContext, TenantContext
from msls.domain.enums import TokenType
from msls.domain.exceptions import AuthenticationException

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def session_from_token(tokens: ITokenService, token: str) -> SessionContext:
    """Decode an access token into a SessionContext.

    Raises:
        AuthenticationException: Invalid, expired, or non-access token.
    """
    try:
        payload = tokens.verify(token, TokenType.ACCESS)
    except ValueError as e:
        raise AuthenticationException(str(e)) from e
    return SessionContext(
        user_id=str(payload["sub"]),
        tenant_id=str(payload["tenant_id"]),
        permissions=frozenset(payload.get("permissions") or []),
        roles=frozenset(payload.get("roles") or []),
    )


def decode_refresh_token(tokens: ITokenService, token: str) -> tuple[str, str]:
    """Return (user_id, tenant_id) from a refresh token.

    Raises:
        AuthenticationException: Invalid, expired, or non-refresh token.
    """
    try:
        payload = tokens.verify(token, TokenType.REFRESH)
    except ValueError as e:
        raise AuthenticationException(str(e)) from e
    return str(payload["sub"]), str(payload["tenant_id"])


class AuthService:
    """Issues tokens for users of one tenant (repositories bound to that tenant)."""

    def __init__(
        self,
        tokens: ITokenService,
        user_repo: Any,
        authorization: AuthorizationService,
        password_verifier: Callable[[str, str], bool],
    ) -> None:
        self.tokens = tokens
        self.user_repo = user_repo
        self.authorization = authorization
        self.password_verifier = password_verifier

    def issue_tokens(
        self,
        user_id: str,
        tenant_id: str,
        permissions: set[str],
        roles: set[str],
    ) -> TokenPair:
        claims = {
            "sub": user_id,
            "tenant_id": tenant_id,
            "permissions": sorted(permissions),
            "roles": sorted(roles),
        }
        return TokenPair(
            access_token=self.tokens.create_access_token(claims),
            refresh_token=self.tokens.create_refresh_token(
                {"sub": user_id, "tenant_id": tenant_id}
            ),
            expires_in=self.tokens.access_ttl_seconds,
        )

    async def login(self, tenant: TenantContext, email: str, password: str) -> TokenPair:
        """Verify credentials in the tenant and issue a token pair.

        Raises:
            AuthenticationException: Unknown user, wrong password, or inactive user.
        """
        user = await self.user_repo.get_by_email(tenant.tenant_id, email)
        if user is None:
            logger.info("Login failed: unknown email in tenant %s", tenant.tenant_id)
            raise AuthenticationException(INVALID_CREDENTIALS)
        if not await asyncio.to_thread(self.password_verifier, password, user.hashed_password):
            logger.info("Login failed: bad password for user %s", user.id)
            raise AuthenticationException(INVALID_CREDENTIALS)
        if not user.is_active:
            raise AuthenticationException("User account is inactive")
        permissions, roles = await self.authorization.get_grants(user.id, tenant.tenant_id)
        logger.info("User %s logged in to tenant %s", user.id, tenant.tenant_id)
        return self.issue_tokens(user.id, tenant.tenant_id, permissions, roles)

    async def refresh(self, tenant: TenantContext, user_id: str) -> TokenPair:
        """Issue a new pair with permissions reloaded from the database."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationException("User not found or inactive")
        await self.authorization.invalidate_user_cache(user_id, tenant.tenant_id)
        permissions, roles = await self.authorization.get_grants(user_id, tenant.tenant_id)
        return self.issue_tokens(user_id, tenant.tenant_id, permissions, roles)
