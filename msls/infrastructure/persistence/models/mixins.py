"""Column mixins shared by the ORM models.

tenant_id on TenantScopedMixin is the column the row-level security policies
compare with current_setting('app.tenant_id').
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from msls.shared.utils.generators import generate_cuid


class CuidMixin:
    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """created_at / updated_at, set by the database (timezone-aware)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class TenantScopedMixin:
    """Owning school; rows go away with the tenant."""

    tenant_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), index=True
    )


class VersionMixin:
    """Optimistic lock counter, bumped by the service on every change."""

    version: Mapped[int] = mapped_column(default=1)


class TenantRecord(CuidMixin, TenantScopedMixin, TimestampMixin):
    """id + tenant_id + timestamps: the shape of every tenant-scoped table."""


class VersionedTenantRecord(TenantRecord, VersionMixin):
    pass
