"""Student ORM model (tenant-scoped, optimistic version)."""

from datetime import date

from sqlalchemy import Date, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from msls.domain.enums import Gender, StudentStatus
from msls.infrastructure.persistence.database import Base
from msls.infrastructure.persistence.models.mixins import VersionedTenantRecord
from msls.infrastructure.persistence.models.tenant import in_values_check


class Student(VersionedTenantRecord, Base):
    """Student record. Table: student. Unique (tenant_id, admission_number)."""

    __tablename__ = "student"

    admission_number: Mapped[str] = mapped_column(String(20), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    blood_group: Mapped[str | None] = mapped_column(String(5), nullable=True)
    photo_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StudentStatus.ACTIVE.value, index=True
    )
    admission_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "admission_number", name="uq_student_admission_number"),
        in_values_check("status", StudentStatus.values(), "student_status_check"),
        in_values_check("gender", Gender.values(), "student_gender_check"),
    )

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)
