"""Customer and loan API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import LoanStatus


class CustomerCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    branch_id: str | None = None
    phone: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=255)
    national_id: str | None = Field(default=None, max_length=64)


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    branch_id: str | None
    first_name: str
    last_name: str
    phone: str | None
    email: str | None
    national_id: str | None
    created_at: datetime | None = None


class LoanCreateRequest(BaseModel):
    customer_id: str = Field(..., min_length=1)
    principal: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    interest_rate: Decimal = Field(..., ge=0, max_digits=6, decimal_places=3)
    term_months: int = Field(..., gt=0, le=600)


class LoanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    customer_id: str
    principal: Decimal
    interest_rate: Decimal
    term_months: int
    status: LoanStatus
    created_at: datetime | None = None
