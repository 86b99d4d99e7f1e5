"""Student API: tenant-scoped CRUD, search and photos.

Every route needs an authenticated user, an active tenant and the matching
students:* permission. Rows are scoped by row-level security on the
tenant-bound session.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from msls.api.v1.dependencies import get_student_service, require
from msls.application.services.access_policy import Authenticated, HasPermission, TenantActive
from msls.application.services.student_service import StudentService
from msls.core.constants import (
    PERM_STUDENTS_CREATE,
    PERM_STUDENTS_DELETE,
    PERM_STUDENTS_READ,
    PERM_STUDENTS_UPDATE,
)
from msls.core.limiter import limit_upload
from msls.domain.enums import StudentStatus
from msls.schemas.student import (
    PhotoUploadResponse,
    PhotoUrlResponse,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)

router = APIRouter()


def _policy(permission: str):
    return Depends(require(Authenticated(), TenantActive(), HasPermission(permission)))


@router.post(
    "",
    response_model=StudentResponse,
    status_code=201,
    dependencies=[_policy(PERM_STUDENTS_CREATE)],
)
async def create_student(
    body: StudentCreate,
    service: Annotated[StudentService, Depends(get_student_service)],
) -> StudentResponse:
    student = await service.create(body.model_dump())
    return StudentResponse.model_validate(student)


@router.get("", response_model=StudentListResponse, dependencies=[_policy(PERM_STUDENTS_READ)])
async def list_students(
    service: Annotated[StudentService, Depends(get_student_service)],
    status: StudentStatus | None = None,
    q: Annotated[str | None, Query(max_length=100, description="Name or admission number prefix")] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> StudentListResponse:
    page = await service.list(status=status, query=q, skip=skip, limit=limit)
    return StudentListResponse(
        items=[StudentResponse.model_validate(s) for s in page.items],
        total=page.total,
        skip=page.skip,
        limit=page.limit,
    )


@router.get(
    "/{student_id}", response_model=StudentResponse, dependencies=[_policy(PERM_STUDENTS_READ)]
)
async def get_student(
    student_id: str,
    service: Annotated[StudentService, Depends(get_student_service)],
) -> StudentResponse:
    return StudentResponse.model_validate(await service.get(student_id))


@router.patch(
    "/{student_id}", response_model=StudentResponse, dependencies=[_policy(PERM_STUDENTS_UPDATE)]
)
async def update_student(
    student_id: str,
    body: StudentUpdate,
    service: Annotated[StudentService, Depends(get_student_service)],
) -> StudentResponse:
    """Partial update; 409 VERSION_CONFLICT when body.version is stale."""
    changes = body.model_dump(exclude_unset=True, exclude={"version"})
    student = await service.update(student_id, changes, expected_version=body.version)
    return StudentResponse.model_validate(student)


@router.delete(
    "/{student_id}", response_model=StudentResponse, dependencies=[_policy(PERM_STUDENTS_DELETE)]
)
async def deactivate_student(
    student_id: str,
    service: Annotated[StudentService, Depends(get_student_service)],
) -> StudentResponse:
    """Soft delete (status becomes inactive)."""
    return StudentResponse.model_validate(await service.deactivate(student_id))


@router.post(
    "/{student_id}/photo",
    response_model=PhotoUploadResponse,
    dependencies=[_policy(PERM_STUDENTS_UPDATE)],
)
@limit_upload
async def upload_student_photo(
    request: Request,
    student_id: str,
    service: Annotated[StudentService, Depends(get_student_service)],
    photo: Annotated[UploadFile, File(description="JPEG or PNG, max 2MB")],
) -> PhotoUploadResponse:
    data = await photo.read()
    result = await service.upload_photo(
        student_id,
        photo.filename or "photo",
        photo.content_type or "application/octet-stream",
        data,
    )
    return PhotoUploadResponse(
        student_id=result.student_id,
        photo_key=result.photo_key,
        checksum=result.checksum,
        size=result.size,
    )


@router.get(
    "/{student_id}/photo-url",
    response_model=PhotoUrlResponse,
    dependencies=[_policy(PERM_STUDENTS_READ)],
)
async def get_student_photo_url(
    student_id: str,
    service: Annotated[StudentService, Depends(get_student_service)],
) -> PhotoUrlResponse:
    """Short-lived presigned download URL (MINIO_PRESIGN_EXPIRES_IN)."""
    return PhotoUrlResponse(url=await service.photo_url(student_id))
