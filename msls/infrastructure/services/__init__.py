"""Infrastructure implementations of application service ports."""

from msls.infrastructure.services.permission_resolver import PermissionResolver
from msls.infrastructure.services.tenant_initialization_service import (
    TenantInitializationService,
)

__all__ = ["PermissionResolver", "TenantInitializationService"]
