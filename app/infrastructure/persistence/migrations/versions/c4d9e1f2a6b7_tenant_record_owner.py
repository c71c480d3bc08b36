"""tenant record ownership ledger

Revision ID: c4d9e1f2a6b7
Revises: b7e2f4a8c3d5
Create Date: 2026-10-18

Row-level security hides other tenants' rows, which would turn a foreign
record id into "not found". tenant_record_owner keeps (table, id) ->
tenant_id outside the policy so the repository can tell the two apart.
A trigger on each secured table keeps it in sync.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "c4d9e1f2a6b7"
down_revision: Union[str, Sequence[str], None] = "b7e2f4a8c3d5"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_RECORD_TABLES = ["branch", "customer", "loan"]

TRACK_OWNER_FUNCTION = """
CREATE OR REPLACE FUNCTION track_tenant_record_owner() RETURNS trigger
LANGUAGE plpgsql AS $$
BEGIN
    IF TG_OP = 'DELETE' THEN
        DELETE FROM tenant_record_owner
        WHERE record_table = TG_TABLE_NAME AND record_id = OLD.id;
        RETURN OLD;
    END IF;
    INSERT INTO tenant_record_owner (record_table, record_id, tenant_id)
    VALUES (TG_TABLE_NAME, NEW.id, NEW.tenant_id)
    ON CONFLICT (record_table, record_id) DO UPDATE SET tenant_id = EXCLUDED.tenant_id;
    RETURN NEW;
END;
$$
"""


def upgrade() -> None:
    op.create_table(
        "tenant_record_owner",
        sa.Column("record_table", sa.String(64), nullable=False),
        sa.Column("record_id", sa.String(), nullable=False),
        sa.Column(
            "tenant_id",
            sa.String(),
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("record_table", "record_id"),
    )
    op.create_index(
        "ix_tenant_record_owner_tenant_id", "tenant_record_owner", ["tenant_id"]
    )
    op.execute(TRACK_OWNER_FUNCTION)
    for table in TENANT_RECORD_TABLES:
        op.execute(
            f"CREATE TRIGGER {table}_track_owner "
            f"AFTER INSERT OR UPDATE OF tenant_id OR DELETE ON {table} "
            "FOR EACH ROW EXECUTE FUNCTION track_tenant_record_owner()"
        )
        # Backfill as table owner; FORCE would hide every row here.
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY")
        op.execute(
            "INSERT INTO tenant_record_owner (record_table, record_id, tenant_id) "
            f"SELECT '{table}', id, tenant_id FROM {table} "
            "ON CONFLICT DO NOTHING"
        )
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")


def downgrade() -> None:
    for table in reversed(TENANT_RECORD_TABLES):
        op.execute(f"DROP TRIGGER IF EXISTS {table}_track_owner ON {table}")
    op.execute("DROP FUNCTION IF EXISTS track_tenant_record_owner()")
    op.drop_index("ix_tenant_record_owner_tenant_id", table_name="tenant_record_owner")
    op.drop_table("tenant_record_owner")
