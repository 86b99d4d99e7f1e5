"""Admission enquiry API (requires the online_admissions feature)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from msls.api.v1.dependencies import get_enquiry_service, require
from msls.application.services.access_policy import (
    Authenticated,
    FeatureEnabled,
    HasPermission,
    TenantActive,
)
from msls.application.services.enquiry_service import EnquiryService
from msls.core.constants import (
    FEATURE_ONLINE_ADMISSIONS,
    PERM_ADMISSIONS_CREATE,
    PERM_ADMISSIONS_READ,
    PERM_ADMISSIONS_UPDATE,
)
from msls.domain.enums import EnquiryStatus
from msls.schemas.enquiry import EnquiryCreate, EnquiryResponse, EnquiryStatusUpdate

router = APIRouter()


def _policy(permission: str):
    return Depends(
        require(
            Authenticated(),
            TenantActive(),
            FeatureEnabled(FEATURE_ONLINE_ADMISSIONS),
            HasPermission(permission),
        )
    )


@router.post(
    "",
    response_model=EnquiryResponse,
    status_code=201,
    dependencies=[_policy(PERM_ADMISSIONS_CREATE)],
)
async def create_enquiry(
    body: EnquiryCreate,
    service: Annotated[EnquiryService, Depends(get_enquiry_service)],
) -> EnquiryResponse:
    """Record an enquiry; the number (ENQ-YYYY-NNNNN) is assigned here."""
    enquiry = await service.create(body.model_dump())
    return EnquiryResponse.model_validate(enquiry)


@router.get(
    "", response_model=list[EnquiryResponse], dependencies=[_policy(PERM_ADMISSIONS_READ)]
)
async def list_enquiries(
    service: Annotated[EnquiryService, Depends(get_enquiry_service)],
    status: EnquiryStatus | None = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[EnquiryResponse]:
    enquiries = await service.list(status=status, skip=skip, limit=limit)
    return [EnquiryResponse.model_validate(e) for e in enquiries]


@router.get(
    "/{enquiry_id}", response_model=EnquiryResponse, dependencies=[_policy(PERM_ADMISSIONS_READ)]
)
async def get_enquiry(
    enquiry_id: str,
    service: Annotated[EnquiryService, Depends(get_enquiry_service)],
) -> EnquiryResponse:
    return EnquiryResponse.model_validate(await service.get(enquiry_id))


@router.patch(
    "/{enquiry_id}/status",
    response_model=EnquiryResponse,
    dependencies=[_policy(PERM_ADMISSIONS_UPDATE)],
)
async def update_enquiry_status(
    enquiry_id: str,
    body: EnquiryStatusUpdate,
    service: Annotated[EnquiryService, Depends(get_enquiry_service)],
) -> EnquiryResponse:
    enquiry = await service.update_status(
        enquiry_id, body.status, follow_up_date=body.follow_up_date, remarks=body.remarks
    )
    return EnquiryResponse.model_validate(enquiry)
