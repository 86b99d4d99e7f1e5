"""Admission enquiry ORM model (tenant-scoped)."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from msls.domain.enums import EnquirySource, EnquiryStatus, Gender
from msls.infrastructure.persistence.database import Base
from msls.infrastructure.persistence.models.mixins import TenantRecord
from msls.infrastructure.persistence.models.tenant import in_values_check


class AdmissionEnquiry(TenantRecord, Base):
    """Prospective-student enquiry. Table: admission_enquiry. Unique (tenant_id, enquiry_number)."""

    __tablename__ = "admission_enquiry"

    enquiry_number: Mapped[str] = mapped_column(String(50), nullable=False)
    student_name: Mapped[str] = mapped_column(String(200), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    class_applying: Mapped[str] = mapped_column(String(50), nullable=False)
    parent_name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    parent_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EnquirySource.WALK_IN.value
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EnquiryStatus.NEW.value, index=True
    )
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "enquiry_number", name="uq_enquiry_number"),
        in_values_check("status", EnquiryStatus.values(), "enquiry_status_check"),
        in_values_check("source", EnquirySource.values(), "enquiry_source_check"),
        in_values_check("gender", Gender.values(), "enquiry_gender_check"),
    )


class EnquiryNumberSequence(Base):
    """Last enquiry sequence handed out per tenant and year. Table: enquiry_number_sequence."""

    __tablename__ = "enquiry_number_sequence"

    tenant_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), primary_key=True
    )
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    last_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
