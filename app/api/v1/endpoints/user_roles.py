"""User roles API: members with roles, caller's permissions, assign and remove."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    PermissionsView,
    TenantCtx,
    get_user_role_service,
    get_user_role_service_for_read,
    require_permission,
)
from app.application.services.user_role_service import UserRoleService
from app.core.limiter import limit_writes
from app.domain.authorization import UserPermissionsView
from app.domain.permissions import PermissionName
from app.schemas.user import (
    AssignmentResponse,
    AssignRoleRequest,
    MemberRoleResponse,
    UserPermissionsResponse,
)

router = APIRouter()

AssignRolesGuard = Annotated[
    UserPermissionsView, Depends(require_permission(PermissionName.USERS_ASSIGN_ROLES))
]


@router.get(
    "/roles",
    response_model=list[MemberRoleResponse],
    dependencies=[Depends(require_permission(PermissionName.USERS_VIEW))],
)
async def list_users_with_roles(
    ctx: TenantCtx,
    user_role_service: Annotated[
        UserRoleService, Depends(get_user_role_service_for_read)
    ],
):
    """Tenant members with their active role (role fields null when unassigned)."""
    members = await user_role_service.list_users_with_roles(ctx.tenant_id)
    return [MemberRoleResponse.model_validate(m) for m in members]


@router.get("/me/permissions", response_model=UserPermissionsResponse)
async def get_my_permissions(view: PermissionsView):
    """The caller's permissions view in the request tenant."""
    return UserPermissionsResponse(
        user_id=view.user_id,
        tenant_id=view.tenant_id,
        role_id=view.role_id,
        role_name=view.role_name,
        hierarchy_level=view.hierarchy_level,
        permissions=sorted(view.permissions),
        is_super_admin=view.is_super_admin,
    )


@router.post("/{user_id}/assign-role", response_model=AssignmentResponse)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: AssignRoleRequest,
    ctx: TenantCtx,
    acting_view: AssignRolesGuard,
    user_role_service: Annotated[UserRoleService, Depends(get_user_role_service)],
):
    """Make role_id the user's only active role in the tenant."""
    assignment = await user_role_service.assign_role(
        ctx.tenant_id, user_id, body.role_id, acting_view
    )
    return AssignmentResponse.model_validate(assignment)


@router.delete("/{user_id}/role", status_code=204)
@limit_writes
async def remove_role(
    request: Request,
    user_id: str,
    ctx: TenantCtx,
    acting_view: AssignRolesGuard,
    user_role_service: Annotated[UserRoleService, Depends(get_user_role_service)],
):
    await user_role_service.remove_role(ctx.tenant_id, user_id, acting_view)
    return Response(status_code=204)
