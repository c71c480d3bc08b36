"""User ORM model: global identity, member of zero or more organizations."""

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class User(CuidMixin, TimestampMixin, Base):
    """User model. Table: app_user. Unique username, email and external_id.

    external_id is the subject issued by the hosted identity provider; it is
    NULL for accounts that only sign in with a local password.
    """

    __tablename__ = "app_user"

    external_id: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hashed_password: Mapped[str | None] = mapped_column(String, nullable=True)
    is_super_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    current_organization_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("organization.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )
