"""Loans API (tenant-scoped)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    TenantCtx,
    get_loan_service,
    get_loan_service_for_read,
    require_permission,
)
from app.application.services.lending_service import LoanService
from app.core.limiter import limit_writes
from app.domain.permissions import PermissionName
from app.schemas.lending import LoanCreateRequest, LoanResponse

router = APIRouter()


@router.get(
    "",
    response_model=list[LoanResponse],
    dependencies=[Depends(require_permission(PermissionName.LOANS_VIEW))],
)
async def list_loans(
    ctx: TenantCtx,
    loan_service: Annotated[LoanService, Depends(get_loan_service_for_read)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    loans = await loan_service.list_loans(ctx, skip=skip, limit=limit)
    return [LoanResponse.model_validate(loan) for loan in loans]


@router.post(
    "",
    response_model=LoanResponse,
    status_code=201,
    dependencies=[Depends(require_permission(PermissionName.LOANS_CREATE))],
)
@limit_writes
async def create_loan(
    request: Request,
    body: LoanCreateRequest,
    ctx: TenantCtx,
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
):
    """Create a pending loan for a customer of the request tenant."""
    loan = await loan_service.create_loan(
        ctx, body.customer_id, body.principal, body.interest_rate, body.term_months
    )
    return LoanResponse.model_validate(loan)


@router.get(
    "/{loan_id}",
    response_model=LoanResponse,
    dependencies=[Depends(require_permission(PermissionName.LOANS_VIEW))],
)
async def get_loan(
    loan_id: str,
    ctx: TenantCtx,
    loan_service: Annotated[LoanService, Depends(get_loan_service_for_read)],
):
    loan = await loan_service.get_loan(ctx, loan_id)
    return LoanResponse.model_validate(loan)
