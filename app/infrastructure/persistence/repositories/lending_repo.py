"""Customer and loan repositories (tenant-scoped business records)."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.lending import CustomerResult, LoanResult
from app.domain.enums import LoanStatus
from app.infrastructure.persistence.models.lending import Customer, Loan
from app.infrastructure.persistence.repositories.base import TenantScopedRepository


def _customer_to_result(c: Customer) -> CustomerResult:
    return CustomerResult(
        id=c.id,
        tenant_id=c.tenant_id,
        branch_id=c.branch_id,
        first_name=c.first_name,
        last_name=c.last_name,
        phone=c.phone,
        email=c.email,
        national_id=c.national_id,
        created_at=c.created_at,
    )


def _loan_to_result(loan: Loan) -> LoanResult:
    return LoanResult(
        id=loan.id,
        tenant_id=loan.tenant_id,
        customer_id=loan.customer_id,
        principal=loan.principal,
        interest_rate=loan.interest_rate,
        term_months=loan.term_months,
        status=LoanStatus(loan.status),
        created_at=loan.created_at,
    )


class CustomerRepository(TenantScopedRepository[Customer]):
    resource_type = "customer"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Customer)

    async def get_customer(self, customer_id: str, tenant_id: str) -> CustomerResult:
        return _customer_to_result(await self.get_scoped(customer_id, tenant_id))

    async def list_customers(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[CustomerResult]:
        rows = await self.list_for_tenant(tenant_id, skip=skip, limit=limit)
        return [_customer_to_result(c) for c in rows]

    async def create_customer(
        self,
        tenant_id: str,
        first_name: str,
        last_name: str,
        *,
        branch_id: str | None = None,
        phone: str | None = None,
        email: str | None = None,
        national_id: str | None = None,
    ) -> CustomerResult:
        customer = Customer(
            tenant_id=tenant_id,
            branch_id=branch_id,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email,
            national_id=national_id,
        )
        return _customer_to_result(await self.create(customer))

    async def delete_customer(self, customer_id: str, tenant_id: str) -> None:
        await self.delete(await self.get_scoped(customer_id, tenant_id))


class LoanRepository(TenantScopedRepository[Loan]):
    resource_type = "loan"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Loan)

    async def get_loan(self, loan_id: str, tenant_id: str) -> LoanResult:
        return _loan_to_result(await self.get_scoped(loan_id, tenant_id))

    async def list_loans(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[LoanResult]:
        rows = await self.list_for_tenant(tenant_id, skip=skip, limit=limit)
        return [_loan_to_result(loan) for loan in rows]

    async def create_loan(
        self,
        tenant_id: str,
        customer_id: str,
        principal: Decimal,
        interest_rate: Decimal,
        term_months: int,
    ) -> LoanResult:
        loan = Loan(
            tenant_id=tenant_id,
            customer_id=customer_id,
            principal=principal,
            interest_rate=interest_rate,
            term_months=term_months,
            status=LoanStatus.PENDING.value,
        )
        return _loan_to_result(await self.create(loan))
