"""Persistence models: ORM entities and mixins."""

from msls.infrastructure.persistence.models.enquiry import (
    AdmissionEnquiry,
    EnquiryNumberSequence,
)
from msls.infrastructure.persistence.models.feature_flag import (
    FeatureFlag,
    TenantFeatureFlag,
    UserFeatureFlag,
)
from msls.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TenantRecord,
    TenantScopedMixin,
    TimestampMixin,
    VersionedTenantRecord,
    VersionMixin,
)
from msls.infrastructure.persistence.models.rbac import (
    Permission,
    Role,
    RolePermission,
    UserRole,
)
from msls.infrastructure.persistence.models.student import Student
from msls.infrastructure.persistence.models.tenant import Tenant
from msls.infrastructure.persistence.models.user import User

__all__ = [
    "AdmissionEnquiry",
    "CuidMixin",
    "EnquiryNumberSequence",
    "FeatureFlag",
    "Permission",
    "Role",
    "RolePermission",
    "Student",
    "Tenant",
    "TenantFeatureFlag",
    "TenantRecord",
    "TenantScopedMixin",
    "TimestampMixin",
    "User",
    "UserFeatureFlag",
    "UserRole",
    "VersionedTenantRecord",
    "VersionMixin",
]
