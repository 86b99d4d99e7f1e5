"""initial schema: tenants, feature flags, users, RBAC, students, enquiries

Revision ID: 0001
Revises:
Create Date: 2026-10-16

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _in(column: str, values: list[str]) -> str:
    return "{} IN ({})".format(column, ", ".join(f"'{v}'" for v in values))


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _tenant_fk() -> sa.Column:
    return sa.Column(
        "tenant_id",
        sa.String(),
        sa.ForeignKey("tenant.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("slug", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        *_timestamps(),
        sa.CheckConstraint(
            _in("status", ["active", "suspended", "inactive", "archived"]),
            name="tenant_status_check",
        ),
    )
    op.create_index("ix_tenant_slug", "tenant", ["slug"], unique=True)
    op.create_index("ix_tenant_status", "tenant", ["status"])

    op.create_table(
        "feature_flag",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("default_value", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_feature_flag_key", "feature_flag", ["key"], unique=True)

    op.create_table(
        "tenant_feature_flag",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "flag_id",
            sa.String(),
            sa.ForeignKey("feature_flag.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("custom_value", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "flag_id", name="uq_tenant_feature_flag"),
    )
    op.create_index("ix_tenant_feature_flag_tenant_id", "tenant_feature_flag", ["tenant_id"])

    op.create_table(
        "user_feature_flag",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column(
            "flag_id",
            sa.String(),
            sa.ForeignKey("feature_flag.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("custom_value", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "user_id", "flag_id", name="uq_user_feature_flag"),
    )
    op.create_index("ix_user_feature_flag_tenant_id", "user_feature_flag", ["tenant_id"])
    op.create_index("ix_user_feature_flag_user_id", "user_feature_flag", ["user_id"])

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "email", name="uq_user_tenant_email"),
    )
    op.create_index("ix_app_user_tenant_id", "app_user", ["tenant_id"])

    op.create_table(
        "role",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "code", name="uq_role_tenant_code"),
    )
    op.create_index("ix_role_tenant_id", "role", ["tenant_id"])

    op.create_table(
        "permission",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "code", name="uq_permission_tenant_code"),
    )
    op.create_index("ix_permission_tenant_id", "permission", ["tenant_id"])

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "role_id", sa.String(), sa.ForeignKey("role.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "permission_id",
            sa.String(),
            sa.ForeignKey("permission.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )
    op.create_index("ix_role_permission_tenant_id", "role_permission", ["tenant_id"])
    op.create_index("ix_role_permission_role_id", "role_permission", ["role_id"])

    op.create_table(
        "user_role",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("app_user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role_id", sa.String(), sa.ForeignKey("role.id", ondelete="CASCADE"), nullable=False
        ),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )
    op.create_index("ix_user_role_tenant_id", "user_role", ["tenant_id"])
    op.create_index("ix_user_role_user_id", "user_role", ["user_id"])

    op.create_table(
        "student",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("admission_number", sa.String(20), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("middle_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("blood_group", sa.String(5), nullable=True),
        sa.Column("photo_key", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("admission_date", sa.Date(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint(
            "tenant_id", "admission_number", name="uq_student_admission_number"
        ),
        sa.CheckConstraint(
            _in("status", ["active", "inactive", "transferred", "graduated"]),
            name="student_status_check",
        ),
        sa.CheckConstraint(
            _in("gender", ["male", "female", "other"]), name="student_gender_check"
        ),
    )
    op.create_index("ix_student_tenant_id", "student", ["tenant_id"])
    op.create_index("ix_student_status", "student", ["status"])
    op.create_index("ix_student_tenant_last_name", "student", ["tenant_id", "last_name"])

    op.create_table(
        "admission_enquiry",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("enquiry_number", sa.String(50), nullable=False),
        sa.Column("student_name", sa.String(200), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column("class_applying", sa.String(50), nullable=False),
        sa.Column("parent_name", sa.String(200), nullable=False),
        sa.Column("parent_phone", sa.String(20), nullable=False),
        sa.Column("parent_email", sa.String(255), nullable=True),
        sa.Column("source", sa.String(20), nullable=False, server_default="walk_in"),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="new"),
        sa.Column("follow_up_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "enquiry_number", name="uq_enquiry_number"),
        sa.CheckConstraint(
            _in("status", ["new", "contacted", "interested", "converted", "closed"]),
            name="enquiry_status_check",
        ),
        sa.CheckConstraint(
            _in(
                "source",
                [
                    "walk_in",
                    "phone",
                    "website",
                    "referral",
                    "advertisement",
                    "social_media",
                    "other",
                ],
            ),
            name="enquiry_source_check",
        ),
        sa.CheckConstraint(
            "gender IS NULL OR " + _in("gender", ["male", "female", "other"]),
            name="enquiry_gender_check",
        ),
    )
    op.create_index("ix_admission_enquiry_tenant_id", "admission_enquiry", ["tenant_id"])
    op.create_index("ix_admission_enquiry_status", "admission_enquiry", ["status"])


def downgrade() -> None:
    for table in (
        "admission_enquiry",
        "student",
        "user_role",
        "role_permission",
        "permission",
        "role",
        "app_user",
        "user_feature_flag",
        "tenant_feature_flag",
        "feature_flag",
        "tenant",
    ):
        op.drop_table(table)
