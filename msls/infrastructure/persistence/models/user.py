"""User ORM model for authentication (tenant-scoped)."""

from sqlalchemy import Boolean, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from msls.infrastructure.persistence.database import Base
from msls.infrastructure.persistence.models.mixins import TenantRecord


class User(TenantRecord, Base):
    """User model. Table: app_user. Unique (tenant_id, email)."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_user_tenant_email"),
    )
