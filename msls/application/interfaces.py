"""Service interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implements (cache, permission
lookup, object storage).
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol


class ICacheService(Protocol):
    """Protocol for cache backends (e.g. Redis)."""

    def is_available(self) -> bool: ...

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool: ...

    async def delete(self, key: str) -> bool: ...

    async def delete_pattern(self, pattern: str) -> int: ...


class IPermissionResolver(Protocol):
    """Resolves a user's granted permission codes and role codes in a tenant."""

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]: ...

    async def get_user_roles(self, user_id: str, tenant_id: str) -> set[str]: ...


class IObjectStorage(Protocol):
    async def upload(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]: ...

    async def delete(self, key: str) -> bool: ...

    async def generate_download_url(
        self, key: str, expiration: timedelta | None = None
    ) -> str: ...


class ITenantInitializer(Protocol):
    """Seeds default roles (and optionally an admin user) for a new tenant."""

    async def initialize(
        self,
        tenant: Any,
        admin_email: str | None = None,
        admin_password: str | None = None,
        admin_name: str | None = None,
    ) -> str | None: ...


class ITokenService(Protocol):
    """Signs and verifies access/refresh JWTs (implemented by TokenService)."""

    @property
    def access_ttl_seconds(self) -> int: ...

    def create_access_token(self, claims: dict[str, Any]) -> str: ...

    def create_refresh_token(self, claims: dict[str, Any]) -> str: ...

    def verify(self, token: str, expected_type: Any = ...) -> dict[str, Any]: ...
