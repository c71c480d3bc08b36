"""DTOs for role and role assignment use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.application.dtos.permission import PermissionResult


@dataclass(frozen=True)
class RoleResult:
    """Role read-model. tenant_id is None for system role templates."""

    id: str
    tenant_id: str | None
    name: str
    description: str | None
    hierarchy_level: int
    is_system_role: bool


@dataclass(frozen=True)
class RoleSummary:
    """Role with the number of users actively holding it in the tenant."""

    role: RoleResult
    user_count: int


@dataclass(frozen=True)
class RoleDetail:
    """Role with its granted catalog entries."""

    role: RoleResult
    permissions: list[PermissionResult] = field(default_factory=list)


@dataclass(frozen=True)
class AssignmentResult:
    """One user-role assignment row."""

    id: str
    user_id: str
    role_id: str
    tenant_id: str
    assigned_by: str | None
    assigned_at: datetime
    is_active: bool


@dataclass(frozen=True)
class MemberRoleResult:
    """Tenant member with their active role (all role fields None when unassigned)."""

    user_id: str
    username: str
    email: str
    full_name: str | None
    role_id: str | None
    role_name: str | None
    hierarchy_level: int | None
