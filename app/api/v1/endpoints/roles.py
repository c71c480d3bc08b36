"""Roles API: list, get, create, re-permission and delete (tenant-scoped).

System role templates are listed alongside the tenant's own roles but are
read-only here.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    TenantCtx,
    get_role_service,
    get_role_service_for_read,
    require_permission,
)
from app.application.services.role_service import RoleService
from app.core.limiter import limit_writes
from app.domain.authorization import UserPermissionsView
from app.domain.permissions import PermissionName
from app.schemas.role import (
    RoleCreateRequest,
    RoleDetailResponse,
    RoleListItem,
    RolePermissionsUpdateRequest,
)

router = APIRouter()


@router.get(
    "",
    response_model=list[RoleListItem],
    dependencies=[Depends(require_permission(PermissionName.ROLES_VIEW))],
)
async def list_roles(
    ctx: TenantCtx,
    role_service: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """Templates and tenant roles, with active user counts, by hierarchy level."""
    summaries = await role_service.list_roles(ctx.tenant_id)
    return [RoleListItem.from_summary(s) for s in summaries]


@router.post("", response_model=RoleDetailResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    ctx: TenantCtx,
    acting_view: Annotated[
        UserPermissionsView, Depends(require_permission(PermissionName.ROLES_CREATE))
    ],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Create an organization role below the caller's own level."""
    detail = await role_service.create_role(
        ctx.tenant_id,
        acting_view,
        name=body.name,
        hierarchy_level=body.hierarchy_level,
        description=body.description,
        permission_ids=body.permission_ids,
    )
    return RoleDetailResponse.from_detail(detail)


@router.get(
    "/{role_id}",
    response_model=RoleDetailResponse,
    dependencies=[Depends(require_permission(PermissionName.ROLES_VIEW))],
)
async def get_role(
    role_id: str,
    ctx: TenantCtx,
    role_service: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    detail = await role_service.get_role(role_id, ctx.tenant_id)
    return RoleDetailResponse.from_detail(detail)


@router.put("/{role_id}/permissions", response_model=RoleDetailResponse)
@limit_writes
async def update_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsUpdateRequest,
    ctx: TenantCtx,
    acting_view: Annotated[
        UserPermissionsView,
        Depends(require_permission(PermissionName.USERS_ASSIGN_ROLES)),
    ],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Replace the role's permission set (full replacement, one transaction)."""
    detail = await role_service.update_role_permissions(
        role_id, ctx.tenant_id, body.permission_ids, acting_view
    )
    return RoleDetailResponse.from_detail(detail)


@router.delete(
    "/{role_id}",
    status_code=204,
    dependencies=[Depends(require_permission(PermissionName.ROLES_DELETE))],
)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    ctx: TenantCtx,
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Delete a tenant role; 409 while any user actively holds it."""
    await role_service.delete_role(role_id, ctx.tenant_id)
    return Response(status_code=204)
