"""enquiry number sequence per tenant and year

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-16

Enquiry numbers are taken with one INSERT ... ON CONFLICT DO UPDATE ...
RETURNING on this table, so concurrent creates in a tenant get distinct
numbers. The table is tenant-scoped and under the same RLS policy as the
other tenant tables.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0003"
down_revision: Union[str, Sequence[str], None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "enquiry_number_sequence",
        sa.Column(
            "tenant_id",
            sa.String(),
            sa.ForeignKey("tenant.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("year", sa.Integer(), primary_key=True),
        sa.Column("last_sequence", sa.Integer(), nullable=False, server_default="0"),
    )
    # Continue from numbers already issued before this table existed. The owner
    # reads every tenant only while admission_enquiry is not forced under RLS.
    op.execute("ALTER TABLE admission_enquiry NO FORCE ROW LEVEL SECURITY")
    op.execute(
        "INSERT INTO enquiry_number_sequence (tenant_id, year, last_sequence) "
        "SELECT tenant_id, CAST(split_part(enquiry_number, '-', 2) AS INTEGER), "
        "MAX(CAST(split_part(enquiry_number, '-', 3) AS INTEGER)) "
        "FROM admission_enquiry WHERE enquiry_number ~ '^ENQ-[0-9]{4}-[0-9]+$' "
        "GROUP BY 1, 2"
    )
    op.execute("ALTER TABLE admission_enquiry FORCE ROW LEVEL SECURITY")
    op.execute("ALTER TABLE enquiry_number_sequence ENABLE ROW LEVEL SECURITY")
    op.execute("ALTER TABLE enquiry_number_sequence FORCE ROW LEVEL SECURITY")
    op.execute(
        "CREATE POLICY tenant_isolation ON enquiry_number_sequence "
        "USING (tenant_id = current_setting('app.tenant_id', true)) "
        "WITH CHECK (tenant_id = current_setting('app.tenant_id', true))"
    )


def downgrade() -> None:
    op.execute("DROP POLICY IF EXISTS tenant_isolation ON enquiry_number_sequence")
    op.drop_table("enquiry_number_sequence")
