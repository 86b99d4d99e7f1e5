"""Student records for one tenant: CRUD, search, photo upload and presigned photo URLs."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Any

from msls.application.dtos.student import PhotoUploadResult, StudentPage
from msls.application.interfaces import IObjectStorage
from msls.core.storage_keys import STUDENT_PHOTO_CATEGORY, tenant_object_key
from msls.domain.context import TenantContext
from msls.domain.enums import StudentStatus
from msls.domain.exceptions import (
    DuplicateRecordException,
    ResourceNotFoundException,
    StorageNotConfiguredException,
    ValidationException,
    VersionConflictException,
)
from msls.shared.utils.datetime import utc_now
from msls.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

PHOTO_MAX_BYTES = 2 * 1024 * 1024
PHOTO_CONTENT_TYPES = {"image/jpeg": ".jpg", "image/png": ".png"}

_UPDATABLE_FIELDS = (
    "first_name",
    "middle_name",
    "last_name",
    "date_of_birth",
    "gender",
    "blood_group",
    "status",
    "admission_date",
)
# Columns that cannot be cleared; a null in a partial update leaves them unchanged.
_REQUIRED_FIELDS = frozenset(
    {"first_name", "last_name", "date_of_birth", "gender", "status", "admission_date"}
)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _check_date_of_birth(value: date | None) -> None:
    if value is not None and value > utc_now().date():
        raise ValidationException("Date of birth cannot be in the future", field="date_of_birth")


class StudentService:
    """Operates on a tenant-bound repository; tenant_id is stamped on new rows."""

    def __init__(
        self,
        student_repo: Any,
        tenant: TenantContext,
        storage: IObjectStorage | None = None,
        student_factory: Any = None,
    ) -> None:
        self.student_repo = student_repo
        self.tenant = tenant
        self.storage = storage
        self.student_factory = student_factory

    async def create(self, data: dict[str, Any]) -> Any:
        """Create a student. Raises DuplicateRecordException on a taken admission number."""
        _check_date_of_birth(data.get("date_of_birth"))
        admission_number = data["admission_number"].strip().upper()
        if await self.student_repo.get_by_admission_number(admission_number) is not None:
            raise DuplicateRecordException("student", "admission_number", admission_number)
        fields = {k: _plain(v) for k, v in data.items()}
        fields["admission_number"] = admission_number
        fields.setdefault("admission_date", None)
        if fields["admission_date"] is None:
            fields["admission_date"] = utc_now().date()
        student = self.student_factory(tenant_id=self.tenant.tenant_id, version=1, **fields)
        created = await self.student_repo.create(student)
        logger.info("Student %s created in tenant %s", created.id, self.tenant.tenant_id)
        return created

    async def get(self, student_id: str) -> Any:
        student = await self.student_repo.get_by_id(student_id)
        if student is None:
            raise ResourceNotFoundException("student", student_id)
        return student

    async def list(
        self,
        *,
        status: StudentStatus | None = None,
        query: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> StudentPage:
        items, total = await self.student_repo.search(
            status=status.value if status else None,
            query=query or None,
            skip=skip,
            limit=limit,
        )
        return StudentPage(items=items, total=total, skip=skip, limit=limit)

    async def update(
        self, student_id: str, changes: dict[str, Any], expected_version: int | None = None
    ) -> Any:
        """Apply changes and bump the version.

        Raises:
            VersionConflictException: expected_version given and stale.
        """
        student = await self.get(student_id)
        if expected_version is not None and student.version != expected_version:
            raise VersionConflictException("student", expected_version, student.version)
        _check_date_of_birth(changes.get("date_of_birth"))
        for name in _UPDATABLE_FIELDS:
            if name in changes and not (changes[name] is None and name in _REQUIRED_FIELDS):
                setattr(student, name, _plain(changes[name]))
        student.version += 1
        return await self.student_repo.update(student)

    async def deactivate(self, student_id: str) -> Any:
        """Soft delete: mark the student inactive (records are kept)."""
        student = await self.get(student_id)
        if student.status == StudentStatus.INACTIVE.value:
            return student
        student.status = StudentStatus.INACTIVE.value
        student.version += 1
        return await self.student_repo.update(student)

    def _require_storage(self) -> IObjectStorage:
        if self.storage is None:
            raise StorageNotConfiguredException()
        return self.storage

    async def upload_photo(
        self, student_id: str, filename: str, content_type: str, data: bytes
    ) -> PhotoUploadResult:
        """Store a JPEG/PNG (max 2MB) under the tenant prefix and record its key."""
        storage = self._require_storage()
        if content_type not in PHOTO_CONTENT_TYPES:
            raise ValidationException(
                "Invalid photo format. Only JPEG and PNG are allowed.", field="photo"
            )
        if len(data) > PHOTO_MAX_BYTES:
            raise ValidationException("Photo size must be less than 2MB", field="photo")
        student = await self.get(student_id)
        ext = PHOTO_CONTENT_TYPES[content_type]
        key = tenant_object_key(
            self.tenant.tenant_id, STUDENT_PHOTO_CATEGORY, f"{student.id}-{generate_cuid()}{ext}"
        )
        stored = await storage.upload(
            key,
            data,
            content_type,
            metadata={"student_id": student.id},
        )
        previous = student.photo_key
        student.photo_key = key
        student.version += 1
        await self.student_repo.update(student)
        if previous and previous != key:
            await storage.delete(previous)
        logger.info("Photo %s uploaded for student %s (%s bytes)", filename, student.id, len(data))
        return PhotoUploadResult(
            student_id=student.id,
            photo_key=key,
            checksum=stored["checksum"],
            size=stored["size"],
        )

    async def photo_url(self, student_id: str) -> str:
        storage = self._require_storage()
        student = await self.get(student_id)
        if not student.photo_key:
            raise ResourceNotFoundException("student_photo", student_id)
        return await storage.generate_download_url(student.photo_key)
