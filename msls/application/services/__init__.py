"""Application services: access policy, guards, authorization, tenants, feature flags, records."""

from msls.application.services.access_policy import AccessDecision, Destination, evaluate
from msls.application.services.auth_service import AuthService
from msls.application.services.authorization_service import AuthorizationService
from msls.application.services.enquiry_service import EnquiryService
from msls.application.services.feature_flag_service import (
    FeatureFlagService,
    FeatureFlagState,
    resolve_flag_states,
)
from msls.application.services.student_service import StudentService
from msls.application.services.tenant_service import TenantService

__all__ = [
    "AccessDecision",
    "AuthService",
    "AuthorizationService",
    "Destination",
    "EnquiryService",
    "FeatureFlagService",
    "FeatureFlagState",
    "StudentService",
    "TenantService",
    "evaluate",
    "resolve_flag_states",
]
