"""enable RLS for tenant isolation

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-16

Enables and forces row-level security on tenant-scoped tables. Policy: only
rows where tenant_id equals current_setting('app.tenant_id'). The application
sets app.tenant_id with set_config(..., true) at the start of each tenant
transaction; with no setting every statement sees zero rows.
Tenant and feature flag tables are platform tables and stay outside RLS.
"""

from typing import Sequence, Union

from alembic import op

revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_SCOPED_TABLES = [
    "app_user",
    "role",
    "permission",
    "role_permission",
    "user_role",
    "student",
    "admission_enquiry",
]


def upgrade() -> None:
    for table in TENANT_SCOPED_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY tenant_isolation ON {table} "
            "USING (tenant_id = current_setting('app.tenant_id', true)) "
            "WITH CHECK (tenant_id = current_setting('app.tenant_id', true))"
        )


def downgrade() -> None:
    for table in reversed(TENANT_SCOPED_TABLES):
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table}")
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
