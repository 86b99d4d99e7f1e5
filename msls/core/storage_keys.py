"""Object storage key layout: every object lives under tenants/<tenant_id>/."""

from msls.core.tenant_validation import is_valid_tenant_id_format
from msls.domain.exceptions import InvalidTenantIdException

STUDENT_PHOTO_CATEGORY = "students/photos"


def tenant_object_key(tenant_id: str, category: str, name: str) -> str:
    """Build a tenant-prefixed object key; rejects malformed tenant ids.

    Only the base name of `name` is kept, so client paths cannot escape the prefix.
    """
    if not is_valid_tenant_id_format(tenant_id):
        raise InvalidTenantIdException()
    safe_name = name.replace("\\", "/").rsplit("/", 1)[-1]
    return f"tenants/{tenant_id}/{category.strip('/')}/{safe_name}"


def is_tenant_object_key(tenant_id: str, key: str) -> bool:
    return key.startswith(f"tenants/{tenant_id}/")
