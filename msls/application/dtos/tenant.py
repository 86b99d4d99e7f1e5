"""DTOs for tenant use cases (no dependency on ORM)."""

from dataclasses import dataclass

from msls.domain.enums import TenantStatus


@dataclass(frozen=True)
class TenantCreationResult:
    """Result of tenant creation (tenant + default roles + optional admin user).

    The admin password is never included.
    """

    tenant_id: str
    slug: str
    name: str
    status: TenantStatus
    admin_user_id: str | None = None
    admin_email: str | None = None
