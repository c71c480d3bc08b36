"""enable RLS on tenant-scoped business records

Revision ID: b7e2f4a8c3d5
Revises: a1c0de5f9b21
Create Date: 2026-10-18

Policy: rows are visible and writable only when tenant_id equals
current_setting('app.current_tenant_id'), which the application binds per
transaction from the request tenant. FORCE applies the policy to the table
owner as well. Directory tables (organization, membership, users, roles,
permissions, assignments) are read across tenants and are not covered.
"""

from typing import Sequence, Union

from alembic import op

revision: str = "b7e2f4a8c3d5"
down_revision: Union[str, Sequence[str], None] = "a1c0de5f9b21"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_RECORD_TABLES = ["branch", "customer", "loan"]


def upgrade() -> None:
    for table in TENANT_RECORD_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY tenant_isolation ON {table} "
            "USING (tenant_id = current_setting('app.current_tenant_id', true)) "
            "WITH CHECK (tenant_id = current_setting('app.current_tenant_id', true))"
        )


def downgrade() -> None:
    for table in reversed(TENANT_RECORD_TABLES):
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table}")
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
