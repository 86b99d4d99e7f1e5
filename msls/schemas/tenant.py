"""Tenant API schemas."""

from pydantic import BaseModel, EmailStr, Field, SecretStr, field_validator

from msls.domain.enums import TenantStatus


def _normalize_slug(value: str) -> str:
    """Lowercase, no spaces, join with '-' (e.g. 'Greenwood High' -> 'greenwood-high')."""
    return "-".join(value.strip().lower().split())


class TenantCreateRequest(BaseModel):
    """Request body for creating a school.

    Default roles are always seeded. When admin_email and admin_password are
    both given an admin user is created and assigned the admin role.
    """

    slug: str = Field(
        ...,
        min_length=3,
        max_length=64,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Unique school slug (normalized to lowercase, hyphen-separated)",
    )
    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    admin_email: EmailStr | None = None
    admin_password: SecretStr | None = Field(
        default=None, description="Initial admin password (min 8 chars); never returned"
    )
    admin_name: str | None = Field(default=None, max_length=200)

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, v: str) -> str:
        """Normalize before pattern/length checks."""
        return _normalize_slug(v) if isinstance(v, str) else v

    @field_validator("admin_password")
    @classmethod
    def validate_admin_password_length(cls, v: SecretStr | None) -> SecretStr | None:
        if v is not None and len(v.get_secret_value()) < 8:
            raise ValueError("Admin password must be at least 8 characters")
        return v


class TenantCreateResponse(BaseModel):
    """Response after tenant creation. The admin password is never returned."""

    tenant_id: str
    slug: str
    name: str
    status: TenantStatus
    admin_user_id: str | None = None
    admin_email: str | None = None


class TenantStatusUpdate(BaseModel):
    status: TenantStatus


class TenantResponse(BaseModel):
    """A tenant as seen by the current request (includes enabled features)."""

    id: str
    slug: str | None = None
    name: str | None = None
    status: str
    features: list[str] = Field(default_factory=list)
