"""Repositories: data access returning application DTOs."""

from app.infrastructure.persistence.repositories.base import (
    BaseRepository,
    TenantScopedRepository,
)
from app.infrastructure.persistence.repositories.branch_repo import BranchRepository
from app.infrastructure.persistence.repositories.lending_repo import (
    CustomerRepository,
    LoanRepository,
)
from app.infrastructure.persistence.repositories.membership_repo import (
    MembershipRepository,
)
from app.infrastructure.persistence.repositories.organization_repo import (
    OrganizationRepository,
)
from app.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from app.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from app.infrastructure.persistence.repositories.role_repo import RoleRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository
from app.infrastructure.persistence.repositories.user_role_assignment_repo import (
    UserRoleAssignmentRepository,
)

__all__ = [
    "BaseRepository",
    "BranchRepository",
    "CustomerRepository",
    "LoanRepository",
    "MembershipRepository",
    "OrganizationRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "TenantScopedRepository",
    "UserRepository",
    "UserRoleAssignmentRepository",
]
