"""Feature flag API: resolved flags for the caller and tenant overrides."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from msls.api.v1.dependencies import (
    get_feature_flag_service,
    get_feature_flag_service_for_write,
    require,
)
from msls.application.services.access_policy import Authenticated, HasPermission, TenantActive
from msls.application.services.feature_flag_service import FeatureFlagService, FeatureFlagState
from msls.core.constants import PERM_FEATURE_FLAGS_MANAGE
from msls.domain.context import RequestContext
from msls.schemas.feature_flag import (
    FeatureFlagListResponse,
    FeatureFlagStateResponse,
    TenantOverrideRequest,
)

router = APIRouter()

_manage = require(Authenticated(), TenantActive(), HasPermission(PERM_FEATURE_FLAGS_MANAGE))


def _to_response(state: FeatureFlagState) -> FeatureFlagStateResponse:
    return FeatureFlagStateResponse(
        key=state.key,
        name=state.name,
        description=state.description,
        enabled=state.enabled,
        custom_value=state.custom_value,
        source=state.source,
    )


@router.get("", response_model=FeatureFlagListResponse)
async def list_feature_flags(
    ctx: Annotated[RequestContext, Depends(require(TenantActive()))],
    flags: Annotated[FeatureFlagService, Depends(get_feature_flag_service)],
) -> FeatureFlagListResponse:
    """All flags resolved for the current tenant (and user, when signed in)."""
    tenant = ctx.require_tenant()
    user_id = ctx.session.user_id if ctx.session.tenant_id == tenant.tenant_id else None
    states = await flags.get_states(tenant.tenant_id, user_id)
    return FeatureFlagListResponse(flags=[_to_response(s) for s in states])


@router.put("/{key}/tenant-override", response_model=FeatureFlagStateResponse)
async def set_tenant_override(
    key: str,
    body: TenantOverrideRequest,
    ctx: Annotated[RequestContext, Depends(_manage)],
    flags: Annotated[FeatureFlagService, Depends(get_feature_flag_service_for_write)],
) -> FeatureFlagStateResponse:
    """Enable or disable a flag for the current tenant."""
    state = await flags.set_tenant_override(
        ctx.require_tenant().tenant_id, key, body.enabled, body.custom_value
    )
    return _to_response(state)


@router.delete("/{key}/tenant-override", status_code=204)
async def remove_tenant_override(
    key: str,
    ctx: Annotated[RequestContext, Depends(_manage)],
    flags: Annotated[FeatureFlagService, Depends(get_feature_flag_service_for_write)],
) -> Response:
    """Drop the tenant override so the flag falls back to its default."""
    await flags.remove_tenant_override(ctx.require_tenant().tenant_id, key)
    return Response(status_code=204)
