"""Auth API schemas."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for login. Users pick their school by slug, not internal tenant id."""

    tenant_slug: str = Field(
        ...,
        min_length=3,
        max_length=64,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="School slug (e.g. greenwood-high)",
    )
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class MeResponse(BaseModel):
    """Current session: user, tenant and grants."""

    user_id: str
    tenant_id: str
    permissions: list[str]
    roles: list[str]
