"""Tenant API: current tenant for the request, plus platform create/status routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from msls.api.v1.dependencies import (
    get_tenant_service_for_write,
    require,
    require_platform_secret,
)
from msls.application.services.access_policy import TenantSelected
from msls.application.services.tenant_service import TenantService
from msls.core.limiter import limit_create_tenant
from msls.domain.context import RequestContext, TenantContext
from msls.schemas.tenant import (
    TenantCreateRequest,
    TenantCreateResponse,
    TenantResponse,
    TenantStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(tenant: TenantContext) -> TenantResponse:
    return TenantResponse(
        id=tenant.tenant_id,
        slug=tenant.slug,
        name=tenant.name,
        status=tenant.status,
        features=sorted(tenant.features),
    )


@router.get("/current", response_model=TenantResponse)
async def get_current_tenant(
    ctx: Annotated[RequestContext, Depends(require(TenantSelected()))],
) -> TenantResponse:
    """Tenant bound to this request (any status) with its enabled features."""
    return _to_response(ctx.require_tenant())


@router.post(
    "",
    response_model=TenantCreateResponse,
    status_code=201,
    dependencies=[Depends(require_platform_secret)],
)
@limit_create_tenant
async def create_tenant(
    request: Request,
    body: TenantCreateRequest,
    tenant_svc: Annotated[TenantService, Depends(get_tenant_service_for_write)],
) -> TenantCreateResponse:
    """Create a school with default roles (and an admin user when credentials are given)."""
    result = await tenant_svc.create_tenant(
        slug=body.slug,
        name=body.name,
        admin_email=str(body.admin_email) if body.admin_email else None,
        admin_password=(
            body.admin_password.get_secret_value() if body.admin_password is not None else None
        ),
        admin_name=body.admin_name,
    )
    return TenantCreateResponse(
        tenant_id=result.tenant_id,
        slug=result.slug,
        name=result.name,
        status=result.status,
        admin_user_id=result.admin_user_id,
        admin_email=result.admin_email,
    )


@router.patch(
    "/{tenant_id}/status",
    response_model=TenantResponse,
    dependencies=[Depends(require_platform_secret)],
)
async def update_tenant_status(
    tenant_id: str,
    body: TenantStatusUpdate,
    tenant_svc: Annotated[TenantService, Depends(get_tenant_service_for_write)],
) -> TenantResponse:
    """Activate, suspend, deactivate or archive a school. Archived is terminal."""
    tenant = await tenant_svc.change_status(tenant_id, body.status)
    return _to_response(tenant)
