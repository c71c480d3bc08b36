"""Organizations API: accessible tenants, creation, switch, and branches.

These routes are addressed by path id rather than the tenant header: they are
how a client discovers and selects the tenant it then sends on every
tenant-scoped request.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    CurrentIdentity,
    get_organization_service,
    get_organization_service_for_read,
)
from app.application.services.organization_service import OrganizationService
from app.core.limiter import limit_create_organization, limit_tenant_switch
from app.schemas.organization import (
    AccessibleOrganizationResponse,
    BranchResponse,
    OrganizationCreateRequest,
    OrganizationResponse,
    TenantSwitchResponse,
)

router = APIRouter()


@router.get("", response_model=list[AccessibleOrganizationResponse])
async def list_organizations(
    identity: CurrentIdentity,
    organization_service: Annotated[
        OrganizationService, Depends(get_organization_service_for_read)
    ],
):
    """Organizations the caller can access, with the caller's role name in each."""
    items = await organization_service.list_accessible(identity)
    return [AccessibleOrganizationResponse.from_result(item) for item in items]


@router.post("", response_model=OrganizationResponse, status_code=201)
@limit_create_organization
async def create_organization(
    request: Request,
    body: OrganizationCreateRequest,
    identity: CurrentIdentity,
    organization_service: Annotated[
        OrganizationService, Depends(get_organization_service)
    ],
):
    """Create an organization; the caller becomes its admin."""
    org = await organization_service.create_organization(identity, body.code, body.name)
    return OrganizationResponse.model_validate(org)


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(
    organization_id: str,
    identity: CurrentIdentity,
    organization_service: Annotated[
        OrganizationService, Depends(get_organization_service_for_read)
    ],
):
    org = await organization_service.get_organization(identity, organization_id)
    return OrganizationResponse.model_validate(org)


@router.post("/{organization_id}/switch", response_model=TenantSwitchResponse)
@limit_tenant_switch
async def switch_organization(
    request: Request,
    organization_id: str,
    identity: CurrentIdentity,
    organization_service: Annotated[
        OrganizationService, Depends(get_organization_service)
    ],
):
    """Acknowledge a tenant switch (403 for non-members, 404 for unknown ids)."""
    result = await organization_service.switch(identity, organization_id)
    return TenantSwitchResponse.model_validate(result)


@router.get("/{organization_id}/branches", response_model=list[BranchResponse])
async def list_branches(
    organization_id: str,
    identity: CurrentIdentity,
    organization_service: Annotated[
        OrganizationService, Depends(get_organization_service_for_read)
    ],
):
    branches = await organization_service.list_branches(identity, organization_id)
    return [BranchResponse.model_validate(b) for b in branches]
