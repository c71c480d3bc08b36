"""Customers API (tenant-scoped). Cross-tenant ids are 403, never filtered."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import (
    TenantCtx,
    get_customer_service,
    get_customer_service_for_read,
    require_permission,
)
from app.application.services.lending_service import CustomerService
from app.core.limiter import limit_writes
from app.domain.permissions import PermissionName
from app.schemas.lending import CustomerCreateRequest, CustomerResponse

router = APIRouter()


@router.get(
    "",
    response_model=list[CustomerResponse],
    dependencies=[Depends(require_permission(PermissionName.CUSTOMERS_VIEW))],
)
async def list_customers(
    ctx: TenantCtx,
    customer_service: Annotated[CustomerService, Depends(get_customer_service_for_read)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    customers = await customer_service.list_customers(ctx, skip=skip, limit=limit)
    return [CustomerResponse.model_validate(c) for c in customers]


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=201,
    dependencies=[Depends(require_permission(PermissionName.CUSTOMERS_CREATE))],
)
@limit_writes
async def create_customer(
    request: Request,
    body: CustomerCreateRequest,
    ctx: TenantCtx,
    customer_service: Annotated[CustomerService, Depends(get_customer_service)],
):
    """Create a customer; branch defaults to the X-Branch-ID branch when sent."""
    customer = await customer_service.create_customer(
        ctx,
        body.first_name,
        body.last_name,
        branch_id=body.branch_id,
        phone=body.phone,
        email=body.email,
        national_id=body.national_id,
    )
    return CustomerResponse.model_validate(customer)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_permission(PermissionName.CUSTOMERS_VIEW))],
)
async def get_customer(
    customer_id: str,
    ctx: TenantCtx,
    customer_service: Annotated[CustomerService, Depends(get_customer_service_for_read)],
):
    customer = await customer_service.get_customer(ctx, customer_id)
    return CustomerResponse.model_validate(customer)


@router.delete(
    "/{customer_id}",
    status_code=204,
    dependencies=[Depends(require_permission(PermissionName.CUSTOMERS_DELETE))],
)
@limit_writes
async def delete_customer(
    request: Request,
    customer_id: str,
    ctx: TenantCtx,
    customer_service: Annotated[CustomerService, Depends(get_customer_service)],
):
    await customer_service.delete_customer(ctx, customer_id)
    return Response(status_code=204)
