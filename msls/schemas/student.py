"""Student API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from msls.domain.enums import Gender, StudentStatus

_BLOOD_GROUP_PATTERN = r"^(A|B|AB|O)[+-]$"


class StudentCreate(BaseModel):
    admission_number: str = Field(
        ..., min_length=1, max_length=20, pattern=r"^[A-Za-z0-9/-]+$"
    )
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: date
    gender: Gender
    blood_group: str | None = Field(default=None, max_length=5, pattern=_BLOOD_GROUP_PATTERN)
    admission_date: date | None = None


class StudentUpdate(BaseModel):
    """Partial update. version is the value the client last read (optimistic lock)."""

    version: int = Field(..., ge=1)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    date_of_birth: date | None = None
    gender: Gender | None = None
    blood_group: str | None = Field(default=None, max_length=5, pattern=_BLOOD_GROUP_PATTERN)
    status: StudentStatus | None = None
    admission_date: date | None = None


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    admission_number: str
    first_name: str
    middle_name: str | None = None
    last_name: str
    full_name: str
    date_of_birth: date
    gender: Gender
    blood_group: str | None = None
    status: StudentStatus
    admission_date: date
    photo_key: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime


class StudentListResponse(BaseModel):
    items: list[StudentResponse]
    total: int
    skip: int
    limit: int


class PhotoUploadResponse(BaseModel):
    student_id: str
    photo_key: str
    checksum: str
    size: int


class PhotoUrlResponse(BaseModel):
    url: str
