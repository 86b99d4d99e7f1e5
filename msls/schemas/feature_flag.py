"""Feature flag API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from msls.domain.enums import FlagSource


class FeatureFlagStateResponse(BaseModel):
    """One flag resolved for the current tenant/user."""

    key: str
    name: str
    description: str | None = None
    enabled: bool
    custom_value: dict[str, Any] | None = None
    source: FlagSource


class FeatureFlagListResponse(BaseModel):
    flags: list[FeatureFlagStateResponse]


class TenantOverrideRequest(BaseModel):
    """Body for PUT /feature-flags/{key}/tenant-override."""

    enabled: bool
    custom_value: dict[str, Any] | None = Field(
        default=None, description="Optional flag-specific configuration"
    )
