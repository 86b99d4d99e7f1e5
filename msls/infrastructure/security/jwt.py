"""JWT access/refresh token creation and verification.

Claims: sub (user id), tenant_id, permissions, roles, type (access|refresh),
iss, iat, exp. Secret, issuer, algorithm and lifetimes come from JWT_* settings.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from msls.core.config import JWTSettings
from msls.domain.enums import TokenType
from msls.shared.utils.datetime import utc_now


class TokenService:
    """Signs and verifies tokens with one JWT configuration."""

    def __init__(self, settings: JWTSettings) -> None:
        self.settings = settings

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.settings.access_expires_in.total_seconds())

    def _encode(self, claims: dict[str, Any], token_type: TokenType, ttl: timedelta) -> str:
        now = utc_now()
        to_encode = dict(claims)
        to_encode.update(
            {
                "type": token_type.value,
                "iss": self.settings.issuer,
                "iat": now,
                "exp": now + ttl,
            }
        )
        encoded = jwt.encode(
            to_encode,
            self.settings.secret.get_secret_value(),
            algorithm=self.settings.algorithm,
        )
        return cast(str, encoded)

    def create_access_token(self, claims: dict[str, Any]) -> str:
        return self._encode(claims, TokenType.ACCESS, self.settings.access_expires_in)

    def create_refresh_token(self, claims: dict[str, Any]) -> str:
        return self._encode(claims, TokenType.REFRESH, self.settings.refresh_expires_in)

    def verify(self, token: str, expected_type: TokenType = TokenType.ACCESS) -> dict[str, Any]:
        """Verify and decode a JWT. Returns the payload.

        Enforces signature, exp, issuer, presence of sub and tenant_id, and
        the token type.

        Raises:
            ValueError: If the token is invalid, expired, or of the wrong type.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.secret.get_secret_value(),
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e!s}") from e
        if not payload.get("sub"):
            raise ValueError("Token missing required claim: sub")
        if not payload.get("tenant_id"):
            raise ValueError("Token missing required claim: tenant_id")
        if payload.get("type") != expected_type.value:
            raise ValueError(f"Expected {expected_type.value} token")
        return payload
