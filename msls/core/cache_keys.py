"""Cache key builders. Single place for key format.

Key components (tenant_id, user_id, ...) must not contain CACHE_KEY_SEP to
avoid ambiguous or colliding keys.
"""

from msls.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_FEATURE,
    CACHE_PREFIX_PERMISSION,
    CACHE_PREFIX_TENANT,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator."""
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def tenant_key(tenant_id: str) -> str:
    """Cache key for tenant lookup by id or slug."""
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}{tenant_id}"


def permission_key(tenant_id: str, user_id: str) -> str:
    """Cache key for a user's permissions and roles in a tenant."""
    _validate_key_component(tenant_id, "tenant_id")
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{tenant_id}{CACHE_KEY_SEP}{user_id}"


def permission_tenant_pattern(tenant_id: str) -> str:
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{tenant_id}{CACHE_KEY_SEP}*"


def feature_key(tenant_id: str, user_id: str | None = None) -> str:
    """Cache key for resolved feature flags (tenant-wide, or per user when given)."""
    _validate_key_component(tenant_id, "tenant_id")
    scope = user_id or "_tenant"
    _validate_key_component(scope, "user_id")
    return f"{CACHE_PREFIX_FEATURE}{CACHE_KEY_SEP}{tenant_id}{CACHE_KEY_SEP}{scope}"


def feature_tenant_pattern(tenant_id: str) -> str:
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_FEATURE}{CACHE_KEY_SEP}{tenant_id}{CACHE_KEY_SEP}*"


def feature_all_pattern() -> str:
    """Pattern matching every cached feature map (all tenants)."""
    return f"{CACHE_PREFIX_FEATURE}{CACHE_KEY_SEP}*"
