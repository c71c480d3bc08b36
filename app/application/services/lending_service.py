"""Customer and loan services: tenant-scoped business records."""

from __future__ import annotations

from decimal import Decimal

from app.application.dtos.lending import CustomerResult, LoanResult
from app.application.interfaces.repositories import (
    IBranchRepository,
    ICustomerRepository,
    ILoanRepository,
)
from app.domain.exceptions import ValidationException
from app.domain.tenancy import RequestTenantContext


class CustomerService:
    """Customers of the request tenant. Records of other tenants are never returned."""

    def __init__(
        self, customer_repo: ICustomerRepository, branch_repo: IBranchRepository
    ) -> None:
        self._customer_repo = customer_repo
        self._branch_repo = branch_repo

    async def list_customers(
        self, ctx: RequestTenantContext, skip: int = 0, limit: int = 100
    ) -> list[CustomerResult]:
        return await self._customer_repo.list_customers(ctx.tenant_id, skip=skip, limit=limit)

    async def get_customer(self, ctx: RequestTenantContext, customer_id: str) -> CustomerResult:
        return await self._customer_repo.get_customer(customer_id, ctx.tenant_id)

    async def create_customer(
        self,
        ctx: RequestTenantContext,
        first_name: str,
        last_name: str,
        branch_id: str | None = None,
        phone: str | None = None,
        email: str | None = None,
        national_id: str | None = None,
    ) -> CustomerResult:
        """Create a customer; branch defaults to the request's branch.

        Raises:
            ValidationException: Empty name.
            CrossTenantAccessException: Branch belongs to another tenant.
        """
        first_name = first_name.strip()
        last_name = last_name.strip()
        if not first_name or not last_name:
            raise ValidationException("First and last name are required", field="name")
        branch_id = branch_id or ctx.branch_id
        if branch_id is not None:
            await self._branch_repo.get_scoped(branch_id, ctx.tenant_id)
        return await self._customer_repo.create_customer(
            ctx.tenant_id,
            first_name,
            last_name,
            branch_id=branch_id,
            phone=phone,
            email=email,
            national_id=national_id,
        )

    async def delete_customer(self, ctx: RequestTenantContext, customer_id: str) -> None:
        await self._customer_repo.delete_customer(customer_id, ctx.tenant_id)


class LoanService:
    """Loans of the request tenant."""

    def __init__(
        self, loan_repo: ILoanRepository, customer_repo: ICustomerRepository
    ) -> None:
        self._loan_repo = loan_repo
        self._customer_repo = customer_repo

    async def list_loans(
        self, ctx: RequestTenantContext, skip: int = 0, limit: int = 100
    ) -> list[LoanResult]:
        return await self._loan_repo.list_loans(ctx.tenant_id, skip=skip, limit=limit)

    async def get_loan(self, ctx: RequestTenantContext, loan_id: str) -> LoanResult:
        return await self._loan_repo.get_loan(loan_id, ctx.tenant_id)

    async def create_loan(
        self,
        ctx: RequestTenantContext,
        customer_id: str,
        principal: Decimal,
        interest_rate: Decimal,
        term_months: int,
    ) -> LoanResult:
        """Create a pending loan for a customer of the same tenant.

        Raises:
            ValidationException: Non-positive principal or term, negative rate.
            CrossTenantAccessException: Customer belongs to another tenant.
        """
        if principal <= 0:
            raise ValidationException("Principal must be positive", field="principal")
        if interest_rate < 0:
            raise ValidationException("Interest rate must not be negative", field="interest_rate")
        if term_months <= 0:
            raise ValidationException("Term must be at least one month", field="term_months")
        await self._customer_repo.get_scoped(customer_id, ctx.tenant_id)
        return await self._loan_repo.create_loan(
            ctx.tenant_id, customer_id, principal, interest_rate, term_months
        )
