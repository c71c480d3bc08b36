"""DTOs for customer and loan use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.domain.enums import LoanStatus


@dataclass(frozen=True)
class CustomerResult:
    """Customer read-model."""

    id: str
    tenant_id: str
    branch_id: str | None
    first_name: str
    last_name: str
    phone: str | None
    email: str | None
    national_id: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class LoanResult:
    """Loan read-model."""

    id: str
    tenant_id: str
    customer_id: str
    principal: Decimal
    interest_rate: Decimal
    term_months: int
    status: LoanStatus
    created_at: datetime | None = None
