"""Organization (tenant), Branch and OrganizationMember ORM models."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import OrganizationStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TimestampMixin,
)


class Organization(CuidMixin, TimestampMixin, Base):
    """Root tenant entity. Table: organization. Status: active, suspended."""

    __tablename__ = "organization"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=OrganizationStatus.ACTIVE.value, index=True
    )
    created_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(
                ", ".join(
                    "'{}'".format(v.replace("'", "''"))
                    for v in OrganizationStatus.values()
                )
            ),
            name="organization_status_check",
        ),
    )


class Branch(MultiTenantModel, Base):
    """Branch of an organization. Table: branch. Unique (tenant_id, code)."""

    __tablename__ = "branch"

    code: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (UniqueConstraint("tenant_id", "code", name="uq_branch_tenant_code"),)


class OrganizationMember(MultiTenantModel, Base):
    """Membership of a user in an organization. Table: organization_member."""

    __tablename__ = "organization_member"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", name="uq_organization_member"),
    )
