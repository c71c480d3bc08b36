"""User, identity and role assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Current user (GET /auth/me). No password."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    full_name: str | None = None
    is_super_admin: bool = False
    is_active: bool = True
    current_organization_id: str | None = None


class UserPermissionsResponse(BaseModel):
    """Caller's permissions view in the active tenant (GET /users/me/permissions)."""

    user_id: str
    tenant_id: str
    role_id: str | None
    role_name: str | None
    hierarchy_level: int | None
    permissions: list[str]
    is_super_admin: bool


class MemberRoleResponse(BaseModel):
    """Tenant member with their active role (GET /users/roles)."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    email: str
    full_name: str | None = None
    role_id: str | None = None
    role_name: str | None = None
    hierarchy_level: int | None = None


class AssignRoleRequest(BaseModel):
    """Request body for POST /users/{id}/assign-role."""

    role_id: str = Field(..., min_length=1)


class AssignmentResponse(BaseModel):
    """The active assignment created by POST /users/{id}/assign-role."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role_id: str
    tenant_id: str
    assigned_by: str | None
    assigned_at: datetime
    is_active: bool
