"""Tenant domain entity and slug value object.

Represents the business concept of a tenant (one school), independent of
persistence. Lifecycle: active <-> suspended/inactive, any -> archived (terminal).
"""

import re
from dataclasses import dataclass

from msls.domain.enums import TenantStatus
from msls.domain.exceptions import TenantStatusTransitionException, ValidationException

# Lowercase alphanumeric with optional hyphens (e.g. "greenwood-high").
_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 64


@dataclass(frozen=True)
class TenantSlug:
    """Value object for the URL-safe tenant slug used in routes and login."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValidationException("Tenant slug is required", field="slug")
        if not SLUG_MIN_LENGTH <= len(self.value) <= SLUG_MAX_LENGTH:
            raise ValidationException(
                f"Tenant slug must be {SLUG_MIN_LENGTH}-{SLUG_MAX_LENGTH} characters",
                field="slug",
            )
        if not _SLUG_RE.match(self.value):
            raise ValidationException(
                "Tenant slug must be lowercase alphanumeric with optional hyphens",
                field="slug",
            )


@dataclass
class TenantEntity:
    """Tenant lifecycle rules. Validation runs on construction."""

    id: str
    slug: TenantSlug
    name: str
    status: TenantStatus

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationException("Tenant ID is required", field="id")
        if not self.name or not self.name.strip():
            raise ValidationException("Tenant name is required", field="name")

    def accepts_traffic(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def change_status(self, target: TenantStatus) -> None:
        """Move to target status. Idempotent; archived tenants cannot change.

        Raises:
            TenantStatusTransitionException: If the tenant is archived.
        """
        if self.status == target:
            return
        if self.status == TenantStatus.ARCHIVED:
            raise TenantStatusTransitionException(self.status.value, target.value)
        self.status = target
