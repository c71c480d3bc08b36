"""UserRoleAssignment ORM model: the role a user holds in one organization."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TenantMixin


class UserRoleAssignment(CuidMixin, TenantMixin, Base):
    """Table: user_role_assignment. At most one active row per (user_id, tenant_id).

    Reassignment deactivates the previous row instead of deleting it, so the
    history of who granted what stays queryable.
    """

    __tablename__ = "user_role_assignment"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    assigned_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        Index(
            "uq_user_role_assignment_active",
            "user_id",
            "tenant_id",
            unique=True,
            postgresql_where=text("is_active"),
        ),
        Index("ix_user_role_assignment_lookup", "tenant_id", "user_id"),
    )
