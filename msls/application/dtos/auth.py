"""DTOs for authentication use cases."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenPair:
    """Access + refresh tokens issued on login or refresh."""

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"
