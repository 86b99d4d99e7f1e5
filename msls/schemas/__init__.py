"""Pydantic request/response schemas for the API."""

from msls.schemas.auth import LoginRequest, MeResponse, RefreshRequest, TokenResponse
from msls.schemas.enquiry import EnquiryCreate, EnquiryResponse, EnquiryStatusUpdate
from msls.schemas.feature_flag import (
    FeatureFlagListResponse,
    FeatureFlagStateResponse,
    TenantOverrideRequest,
)
from msls.schemas.health import HealthResponse, ReadinessResponse
from msls.schemas.student import (
    PhotoUploadResponse,
    PhotoUrlResponse,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from msls.schemas.tenant import (
    TenantCreateRequest,
    TenantCreateResponse,
    TenantResponse,
    TenantStatusUpdate,
)

__all__ = [
    "EnquiryCreate",
    "EnquiryResponse",
    "EnquiryStatusUpdate",
    "FeatureFlagListResponse",
    "FeatureFlagStateResponse",
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "PhotoUploadResponse",
    "PhotoUrlResponse",
    "ReadinessResponse",
    "RefreshRequest",
    "StudentCreate",
    "StudentListResponse",
    "StudentResponse",
    "StudentUpdate",
    "TenantCreateRequest",
    "TenantCreateResponse",
    "TenantOverrideRequest",
    "TenantResponse",
    "TenantStatusUpdate",
    "TokenResponse",
]
