"""Admission enquiry API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from msls.domain.enums import EnquirySource, EnquiryStatus, Gender

# Digits with optional leading +, spaces or hyphens (e.g. +91 98765-43210).
PHONE_PATTERN = r"^\+?[0-9][0-9 -]{6,18}$"


class EnquiryCreate(BaseModel):
    student_name: str = Field(..., min_length=1, max_length=200)
    date_of_birth: date | None = None
    gender: Gender | None = None
    class_applying: str = Field(..., min_length=1, max_length=50)
    parent_name: str = Field(..., min_length=1, max_length=200)
    parent_phone: str = Field(..., max_length=20, pattern=PHONE_PATTERN)
    parent_email: EmailStr | None = None
    source: EnquirySource = EnquirySource.WALK_IN
    remarks: str | None = Field(default=None, max_length=2000)
    follow_up_date: date | None = None


class EnquiryStatusUpdate(BaseModel):
    status: EnquiryStatus
    follow_up_date: date | None = None
    remarks: str | None = Field(default=None, max_length=2000)


class EnquiryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    enquiry_number: str
    student_name: str
    date_of_birth: date | None = None
    gender: Gender | None = None
    class_applying: str
    parent_name: str
    parent_phone: str
    parent_email: str | None = None
    source: EnquirySource
    remarks: str | None = None
    status: EnquiryStatus
    follow_up_date: date | None = None
    created_at: datetime
    updated_at: datetime
