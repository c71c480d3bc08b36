"""Pydantic request/response schemas for the API."""

from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.lending import (
    CustomerCreateRequest,
    CustomerResponse,
    LoanCreateRequest,
    LoanResponse,
)
from app.schemas.organization import (
    AccessibleOrganizationResponse,
    BranchResponse,
    OrganizationCreateRequest,
    OrganizationResponse,
    TenantSwitchResponse,
)
from app.schemas.permission import PermissionCategoryGroup, PermissionResponse
from app.schemas.role import (
    RoleCreateRequest,
    RoleDetailResponse,
    RoleListItem,
    RolePermissionsUpdateRequest,
    RoleResponse,
)
from app.schemas.user import (
    AssignmentResponse,
    AssignRoleRequest,
    MemberRoleResponse,
    UserPermissionsResponse,
    UserResponse,
)

__all__ = [
    "AccessibleOrganizationResponse",
    "AssignRoleRequest",
    "AssignmentResponse",
    "BranchResponse",
    "CustomerCreateRequest",
    "CustomerResponse",
    "HealthResponse",
    "LoanCreateRequest",
    "LoanResponse",
    "LoginRequest",
    "MemberRoleResponse",
    "OrganizationCreateRequest",
    "OrganizationResponse",
    "PermissionCategoryGroup",
    "PermissionResponse",
    "RoleCreateRequest",
    "RoleDetailResponse",
    "RoleListItem",
    "RolePermissionsUpdateRequest",
    "RoleResponse",
    "TenantSwitchResponse",
    "TokenResponse",
    "UserPermissionsResponse",
    "UserResponse",
]
