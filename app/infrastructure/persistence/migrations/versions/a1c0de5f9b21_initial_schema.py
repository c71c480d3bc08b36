"""initial schema: organizations, users, RBAC, customers and loans

Revision ID: a1c0de5f9b21
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1c0de5f9b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


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
        sa.ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create every table; app_user <-> organization foreign keys are added last."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("external_id", sa.String(), nullable=True, unique=True),
        sa.Column("username", sa.String(150), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=True),
        sa.Column("is_super_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("current_organization_id", sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "organization",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("code", sa.String(), nullable=False, unique=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column(
            "created_by",
            sa.String(),
            sa.ForeignKey("app_user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('active', 'suspended')", name="organization_status_check"
        ),
    )
    op.create_index("ix_organization_code", "organization", ["code"])
    op.create_index("ix_organization_status", "organization", ["status"])
    op.create_foreign_key(
        "fk_app_user_current_organization",
        "app_user",
        "organization",
        ["current_organization_id"],
        ["id"],
        ondelete="SET NULL",
    )

    op.create_table(
        "branch",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "code", name="uq_branch_tenant_code"),
    )
    op.create_index("ix_branch_tenant_id", "branch", ["tenant_id"])

    op.create_table(
        "organization_member",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("app_user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "user_id", name="uq_organization_member"),
    )
    op.create_index("ix_organization_member_tenant_id", "organization_member", ["tenant_id"])
    op.create_index("ix_organization_member_user_id", "organization_member", ["user_id"])

    op.create_table(
        "permission",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("resource", sa.String(50), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_permission_category", "permission", ["category"])

    op.create_table(
        "role",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(),
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("hierarchy_level", sa.Integer(), nullable=False),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "name", name="uq_role_tenant_name"),
        sa.CheckConstraint("hierarchy_level > 0", name="role_hierarchy_level_positive"),
    )
    op.create_index("ix_role_tenant_id", "role", ["tenant_id"])
    op.create_index(
        "uq_role_system_name",
        "role",
        ["name"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NULL"),
    )

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "role_id",
            sa.String(),
            sa.ForeignKey("role.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "permission_id",
            sa.String(),
            sa.ForeignKey("permission.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )
    op.create_index("ix_role_permission_role_id", "role_permission", ["role_id"])

    op.create_table(
        "user_role_assignment",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "user_id",
            sa.String(),
            sa.ForeignKey("app_user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role_id",
            sa.String(),
            sa.ForeignKey("role.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "assigned_by",
            sa.String(),
            sa.ForeignKey("app_user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_index("ix_user_role_assignment_tenant_id", "user_role_assignment", ["tenant_id"])
    op.create_index("ix_user_role_assignment_role_id", "user_role_assignment", ["role_id"])
    op.create_index(
        "ix_user_role_assignment_lookup", "user_role_assignment", ["tenant_id", "user_id"]
    )
    # At most one active assignment per user and organization.
    op.create_index(
        "uq_user_role_assignment_active",
        "user_role_assignment",
        ["user_id", "tenant_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "customer",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "branch_id",
            sa.String(),
            sa.ForeignKey("branch.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("national_id", sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_customer_tenant_id", "customer", ["tenant_id"])

    op.create_table(
        "loan",
        sa.Column("id", sa.String(), primary_key=True),
        _tenant_fk(),
        sa.Column(
            "customer_id",
            sa.String(),
            sa.ForeignKey("customer.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("principal", sa.Numeric(14, 2), nullable=False),
        sa.Column("interest_rate", sa.Numeric(6, 3), nullable=False),
        sa.Column("term_months", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.CheckConstraint("principal > 0", name="loan_principal_positive"),
        sa.CheckConstraint("term_months > 0", name="loan_term_positive"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'disbursed', 'closed', 'rejected')",
            name="loan_status_check",
        ),
    )
    op.create_index("ix_loan_tenant_id", "loan", ["tenant_id"])
    op.create_index("ix_loan_customer_id", "loan", ["customer_id"])
    op.create_index("ix_loan_status", "loan", ["status"])


def downgrade() -> None:
    op.drop_table("loan")
    op.drop_table("customer")
    op.drop_table("user_role_assignment")
    op.drop_table("role_permission")
    op.drop_table("role")
    op.drop_table("permission")
    op.drop_table("organization_member")
    op.drop_table("branch")
    op.drop_constraint("fk_app_user_current_organization", "app_user", type_="foreignkey")
    op.drop_table("organization")
    op.drop_table("app_user")
