"""Application DTOs (no ORM dependency)."""

from app.application.dtos.lending import CustomerResult, LoanResult
from app.application.dtos.organization import (
    AccessibleOrganization,
    BranchResult,
    OrganizationResult,
    TenantSwitchResult,
)
from app.application.dtos.permission import PermissionResult
from app.application.dtos.role import (
    AssignmentResult,
    MemberRoleResult,
    RoleDetail,
    RoleResult,
    RoleSummary,
)
from app.application.dtos.user import Identity, UserResult

__all__ = [
    "AccessibleOrganization",
    "AssignmentResult",
    "BranchResult",
    "CustomerResult",
    "Identity",
    "LoanResult",
    "MemberRoleResult",
    "OrganizationResult",
    "PermissionResult",
    "RoleDetail",
    "RoleResult",
    "RoleSummary",
    "TenantSwitchResult",
    "UserResult",
]
