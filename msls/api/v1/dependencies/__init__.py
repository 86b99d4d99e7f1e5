"""Presentation-layer dependency injection (composition root)."""

from msls.api.v1.dependencies.auth import (
    get_authenticated_session,
    get_session_context,
    require_platform_secret,
)
from msls.api.v1.dependencies.common import get_cache, get_storage, get_token_service
from msls.api.v1.dependencies.policy import require
from msls.api.v1.dependencies.services import (
    get_enquiry_service,
    get_student_service,
    tenant_auth_service,
)
from msls.api.v1.dependencies.tenant import (
    get_feature_flag_service,
    get_feature_flag_service_for_write,
    get_request_context,
    get_tenant_context,
    get_tenant_db,
    get_tenant_service,
    get_tenant_service_for_write,
)

__all__ = [
    "get_authenticated_session",
    "get_cache",
    "get_enquiry_service",
    "get_feature_flag_service",
    "get_feature_flag_service_for_write",
    "get_request_context",
    "get_session_context",
    "get_storage",
    "get_student_service",
    "get_tenant_context",
    "get_tenant_db",
    "get_tenant_service",
    "get_tenant_service_for_write",
    "get_token_service",
    "require",
    "require_platform_secret",
    "tenant_auth_service",
]
