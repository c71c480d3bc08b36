"""Role API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.role import RoleDetail, RoleSummary
from app.schemas.permission import PermissionResponse


class RoleCreateRequest(BaseModel):
    """Request body for creating an organization role."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    hierarchy_level: int = Field(..., description="Lower number means more authority")
    permission_ids: list[str] = Field(default_factory=list, max_length=200)


class RolePermissionsUpdateRequest(BaseModel):
    """Request body for PUT /roles/{id}/permissions (full replacement)."""

    permission_ids: list[str] = Field(default_factory=list, max_length=200)


class RoleResponse(BaseModel):
    """Role without its permissions."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str | None
    name: str
    description: str | None
    hierarchy_level: int
    is_system_role: bool


class RoleListItem(RoleResponse):
    """Role with the number of users actively holding it in the tenant."""

    user_count: int = 0

    @classmethod
    def from_summary(cls, summary: RoleSummary) -> "RoleListItem":
        return cls(**vars(summary.role), user_count=summary.user_count)


class RoleDetailResponse(RoleResponse):
    """Role with its permission set."""

    permissions: list[PermissionResponse] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: RoleDetail) -> "RoleDetailResponse":
        return cls(
            **vars(detail.role),
            permissions=[PermissionResponse.model_validate(p) for p in detail.permissions],
        )
