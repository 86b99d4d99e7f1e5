"""Feature flag ORM models: global flags plus tenant and user overrides.

Platform tables (no RLS): overrides carry tenant_id and are always queried
with an explicit tenant filter.
"""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from msls.infrastructure.persistence.database import Base
from msls.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class FeatureFlag(CuidMixin, TimestampMixin, Base):
    """Global flag definition. Table: feature_flag. Key is unique."""

    __tablename__ = "feature_flag"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_value: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    flag_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)


class TenantFeatureFlag(CuidMixin, TimestampMixin, Base):
    """Per-tenant override. Table: tenant_feature_flag. Unique (tenant_id, flag_id)."""

    __tablename__ = "tenant_feature_flag"

    tenant_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True
    )
    flag_id: Mapped[str] = mapped_column(
        String, ForeignKey("feature_flag.id", ondelete="CASCADE"), nullable=False
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)
    custom_value: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "flag_id", name="uq_tenant_feature_flag"),
    )


class UserFeatureFlag(CuidMixin, TimestampMixin, Base):
    """Per-user override (beta access). Table: user_feature_flag. Unique (tenant_id, user_id, flag_id)."""

    __tablename__ = "user_feature_flag"

    tenant_id: Mapped[str] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    flag_id: Mapped[str] = mapped_column(
        String, ForeignKey("feature_flag.id", ondelete="CASCADE"), nullable=False
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)
    custom_value: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", "flag_id", name="uq_user_feature_flag"),
    )
