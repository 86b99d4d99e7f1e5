"""Tenant id format check.

Used by tenant resolution (header and token claim) and by the tenant-bound
session, so a malformed id is refused before it is ever sent to PostgreSQL.
"""

import re

TENANT_ID_MAX_LENGTH = 64
TENANT_ID_PATTERN = re.compile(rf"[A-Za-z0-9_-]{{1,{TENANT_ID_MAX_LENGTH}}}")


def is_valid_tenant_id_format(value: str | None) -> bool:
    """True for 1-64 characters of letters, digits, '-' and '_'."""
    return bool(value) and TENANT_ID_PATTERN.fullmatch(value) is not None
