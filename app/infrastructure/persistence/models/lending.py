"""Customer and Loan ORM models (organization-scoped business records)."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import LoanStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import MultiTenantModel


class Customer(MultiTenantModel, Base):
    """Borrower. Table: customer."""

    __tablename__ = "customer"

    branch_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("branch.id", ondelete="SET NULL"), nullable=True
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    national_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class Loan(MultiTenantModel, Base):
    """Loan issued to a customer. Table: loan."""

    __tablename__ = "loan"

    customer_id: Mapped[str] = mapped_column(
        String, ForeignKey("customer.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    principal: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=LoanStatus.PENDING.value, index=True
    )

    __table_args__ = (
        CheckConstraint("principal > 0", name="loan_principal_positive"),
        CheckConstraint("term_months > 0", name="loan_term_positive"),
        CheckConstraint(
            "status IN ({})".format(
                ", ".join("'{}'".format(v) for v in LoanStatus.values())
            ),
            name="loan_status_check",
        ),
    )
