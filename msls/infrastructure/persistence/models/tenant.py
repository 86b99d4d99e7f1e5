"""Tenant ORM model. Root entity for the multi-tenant hierarchy (no tenant_id, no RLS)."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from msls.domain.enums import TenantStatus
from msls.infrastructure.persistence.database import Base
from msls.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


def in_values_check(column: str, values: list[str], name: str) -> CheckConstraint:
    """CHECK constraint restricting column to the given string values."""
    quoted = ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    return CheckConstraint(f"{column} IN ({quoted})", name=name)


class Tenant(CuidMixin, TimestampMixin, Base):
    """One school. Table: tenant. Status: active, suspended, inactive, archived."""

    __tablename__ = "tenant"

    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        in_values_check("status", TenantStatus.values(), "tenant_status_check"),
    )
