"""Domain enumerations for the school-management platform.

Enums represent fixed sets of domain values (tenant status, student status,
enquiry source, ...). All are str-valued so they store and serialize as text.
"""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status.

    Only ACTIVE tenants accept API traffic and pass the tenant guard.
    """

    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class StudentStatus(_ValuesMixin, str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TRANSFERRED = "transferred"
    GRADUATED = "graduated"


class Gender(_ValuesMixin, str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class EnquiryStatus(_ValuesMixin, str, Enum):
    """Admission enquiry pipeline state."""

    NEW = "new"
    CONTACTED = "contacted"
    INTERESTED = "interested"
    CONVERTED = "converted"
    CLOSED = "closed"


class EnquirySource(_ValuesMixin, str, Enum):
    """How the enquiry reached the school."""

    WALK_IN = "walk_in"
    PHONE = "phone"
    WEBSITE = "website"
    REFERRAL = "referral"
    ADVERTISEMENT = "advertisement"
    SOCIAL_MEDIA = "social_media"
    OTHER = "other"


class FlagSource(_ValuesMixin, str, Enum):
    """Where a resolved feature flag value came from (user > tenant > default)."""

    DEFAULT = "default"
    TENANT = "tenant"
    USER = "user"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
