"""Ownership ledger for row-level-secured tables.

Maintained by database triggers on branch, customer and loan. Not covered by
row-level security, so the owning tenant of any record id can be read from a
session bound to another tenant.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base


class TenantRecordOwner(Base):
    """Owning tenant per (table, record id). Table: tenant_record_owner."""

    __tablename__ = "tenant_record_owner"

    record_table: Mapped[str] = mapped_column(String(64), primary_key=True)
    record_id: Mapped[str] = mapped_column(String, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
