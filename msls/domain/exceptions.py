"""Domain exceptions.

Each carries a stable error_code; msls.core.exception_handlers maps the code
to an HTTP status and renders to_dict() as the response body.
"""

from typing import Any


class MslsException(Exception):
    """Root of the hierarchy; error_code defaults to the class name."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(MslsException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(MslsException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(MslsException):
    """Raised when the session lacks a required permission or role."""

    def __init__(
        self,
        required: list[str] | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with the requirement that was not met.

        Args:
            required: Permission or role codes that were required.
            message: Human-readable message.
        """
        details: dict[str, Any] = {}
        if required:
            details["required"] = list(required)
        super().__init__(message, "PERMISSION_DENIED", details)


class TenantRequiredException(MslsException):
    """Raised when an operation needs a tenant and none is established."""

    def __init__(self, message: str = "Tenant context is required") -> None:
        super().__init__(message, "TENANT_REQUIRED")


class InvalidTenantIdException(MslsException):
    """Raised when a tenant id fails format validation."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid tenant ID format (use alphanumeric, hyphen, underscore; max 64 characters)",
            "INVALID_TENANT_ID",
        )


class TenantMismatchException(MslsException):
    """Raised when the token's tenant differs from the requested tenant."""

    def __init__(self) -> None:
        super().__init__(
            "Requested tenant does not match the authenticated tenant",
            "TENANT_MISMATCH",
        )


class TenantNotFoundException(MslsException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class TenantUnavailableException(MslsException):
    """Raised when the tenant exists but is not active."""

    def __init__(self, tenant_id: str, status: str) -> None:
        """Initialize with tenant id and its current status.

        Args:
            tenant_id: The tenant that was requested.
            status: Current status (e.g. 'suspended'); used as the reason code.
        """
        super().__init__(
            f"Tenant is not available: {status}",
            "TENANT_UNAVAILABLE",
            {"tenant_id": tenant_id, "reason": status},
        )


class TenantAlreadyExistsException(MslsException):
    """Raised when creating a tenant whose slug already exists."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            f"Tenant with slug '{slug}' already exists",
            "TENANT_ALREADY_EXISTS",
            {"slug": slug},
        )


class TenantStatusTransitionException(MslsException):
    """Raised when a tenant status change is not allowed (e.g. leaving archived)."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"Cannot change tenant status from {current} to {target}",
            "INVALID_STATUS_TRANSITION",
            {"current": current, "target": target},
        )


class FeatureUnavailableException(MslsException):
    """Raised when the tenant does not have a required feature enabled."""

    def __init__(self, features: list[str], reason: str = "disabled") -> None:
        """Initialize with the missing feature key(s).

        Args:
            features: Feature keys that were required but not enabled.
            reason: 'disabled', 'all_disabled' or 'some_disabled'.
        """
        super().__init__(
            "This feature is not available",
            "FEATURE_UNAVAILABLE",
            {"features": list(features), "reason": reason},
        )


class ResourceNotFoundException(MslsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateRecordException(MslsException):
    """Raised when a unique business key already exists in the tenant."""

    def __init__(self, resource_type: str, field: str, value: str) -> None:
        super().__init__(
            f"{resource_type} with {field} '{value}' already exists",
            "DUPLICATE_RECORD",
            {"resource_type": resource_type, "field": field, "value": value},
        )


class VersionConflictException(MslsException):
    """Raised on optimistic-lock mismatch (record changed since it was read)."""

    def __init__(self, resource_type: str, expected: int, actual: int) -> None:
        super().__init__(
            f"{resource_type} was modified by another request",
            "VERSION_CONFLICT",
            {"resource_type": resource_type, "expected": expected, "actual": actual},
        )


class SqlNotConfiguredException(MslsException):
    """Raised when the database engine could not be created."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class StorageNotConfiguredException(MslsException):
    """Raised when an operation needs object storage and none is configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires object storage that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
