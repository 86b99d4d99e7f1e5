"""Application DTOs (no dependency on ORM)."""

from msls.application.dtos.auth import TokenPair
from msls.application.dtos.student import PhotoUploadResult, StudentPage
from msls.application.dtos.tenant import TenantCreationResult

__all__ = ["PhotoUploadResult", "StudentPage", "TenantCreationResult", "TokenPair"]
