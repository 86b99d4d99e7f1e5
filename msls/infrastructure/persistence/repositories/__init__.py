"""Repositories over AsyncSession (platform and tenant-scoped)."""

from msls.infrastructure.persistence.repositories.base import BaseRepository
from msls.infrastructure.persistence.repositories.enquiry_repo import EnquiryRepository
from msls.infrastructure.persistence.repositories.feature_flag_repo import (
    FeatureFlagRepository,
)
from msls.infrastructure.persistence.repositories.rbac_repo import RbacRepository
from msls.infrastructure.persistence.repositories.student_repo import StudentRepository
from msls.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from msls.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "EnquiryRepository",
    "FeatureFlagRepository",
    "RbacRepository",
    "StudentRepository",
    "TenantRepository",
    "UserRepository",
]
