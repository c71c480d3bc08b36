"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain types only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from decimal import Decimal

    from app.application.dtos.lending import CustomerResult, LoanResult
    from app.application.dtos.organization import BranchResult, OrganizationResult
    from app.application.dtos.permission import PermissionResult
    from app.application.dtos.role import (
        AssignmentResult,
        MemberRoleResult,
        RoleResult,
        RoleSummary,
    )
    from app.application.dtos.user import UserResult
    from app.domain.permissions import CatalogEntry


class IPermissionRepository(Protocol):
    """Protocol for the global permission catalog."""

    async def list_all(self) -> list[PermissionResult]:
        """Return every catalog entry."""

    async def get_permission(self, permission_id: str) -> PermissionResult | None:
        """Return one catalog entry by id."""

    async def get_by_ids(self, permission_ids: Sequence[str]) -> list[PermissionResult]:
        """Return entries for the given ids (missing ids are omitted)."""

    async def upsert_catalog(self, entries: Sequence[CatalogEntry]) -> int:
        """Insert missing entries; return how many were inserted."""


class IRoleRepository(Protocol):
    """Protocol for roles (system templates and organization roles)."""

    async def create_role(
        self,
        tenant_id: str | None,
        name: str,
        description: str | None,
        hierarchy_level: int,
        *,
        is_system_role: bool = False,
    ) -> RoleResult:
        """Create a role; return read-model DTO."""

    async def get_visible(self, role_id: str, tenant_id: str) -> RoleResult | None:
        """Return role if it is a system template or owned by tenant."""

    async def get_entity_for_tenant(self, role_id: str, tenant_id: str) -> Any:
        """Return tenant-owned role ORM (locked for update) or None."""

    async def find_visible_by_name(self, name: str, tenant_id: str) -> RoleResult | None:
        """Case-insensitive lookup among system templates and tenant roles."""

    async def get_system_role_by_name(self, name: str) -> RoleResult | None:
        """Return the system template with this name."""

    async def list_visible_with_user_count(self, tenant_id: str) -> list[RoleSummary]:
        """System templates plus tenant roles, with active assignment counts."""

    async def delete_role(self, role: Any) -> None:
        """Delete a role entity."""


class IRolePermissionRepository(Protocol):
    """Protocol for role-permission links."""

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        """Return catalog entries granted by role."""

    async def replace_role_permissions(
        self, role_id: str, permission_ids: Sequence[str]
    ) -> None:
        """Replace the full permission set of role."""


class IUserRoleAssignmentRepository(Protocol):
    """Protocol for user-role assignments."""

    async def get_active_role(self, user_id: str, tenant_id: str) -> RoleResult | None:
        """Return the role the user actively holds in tenant."""

    async def lock_active_assignments(self, user_id: str, tenant_id: str) -> list[Any]:
        """SELECT ... FOR UPDATE the user's active rows in tenant."""

    async def deactivate_active(self, user_id: str, tenant_id: str) -> int:
        """Deactivate the user's active rows; return count."""

    async def create_assignment(
        self, user_id: str, role_id: str, tenant_id: str, assigned_by: str | None
    ) -> AssignmentResult:
        """Insert an active assignment."""

    async def count_active_for_role(self, role_id: str) -> int:
        """Return number of active assignments referencing role."""

    async def list_active_user_ids_for_role(
        self, role_id: str, tenant_id: str
    ) -> list[str]:
        """Return users actively holding role in tenant."""

    async def list_members_with_roles(self, tenant_id: str) -> list[MemberRoleResult]:
        """Return tenant members with their active role."""

    async def get_active_role_names_for_user(self, user_id: str) -> dict[str, str]:
        """Return tenant_id -> active role name for the user."""


class IOrganizationRepository(Protocol):
    """Protocol for organizations."""

    async def get_organization(self, organization_id: str) -> OrganizationResult | None:
        """Return organization by id."""

    async def get_by_code(self, code: str) -> OrganizationResult | None:
        """Return organization by unique code."""

    async def create_organization(
        self, code: str, name: str, created_by: str | None
    ) -> OrganizationResult:
        """Create an organization."""

    async def list_for_user(self, user_id: str) -> list[OrganizationResult]:
        """Return organizations where user is an active member."""

    async def list_all(self) -> list[OrganizationResult]:
        """Return every organization (super admin view)."""


class IMembershipRepository(Protocol):
    """Protocol for organization membership."""

    async def is_active_member(self, tenant_id: str, user_id: str) -> bool:
        """Return True if user is an active member of tenant."""

    async def list_organization_ids_for_user(self, user_id: str) -> set[str]:
        """Return ids of organizations where user is an active member."""

    async def add_member(self, tenant_id: str, user_id: str) -> None:
        """Add (or reactivate) a membership."""


class IBranchRepository(Protocol):
    """Protocol for branches."""

    async def get_branch(self, branch_id: str) -> BranchResult | None:
        """Return branch by id."""

    async def list_branches(self, tenant_id: str) -> list[BranchResult]:
        """Return branches of tenant."""

    async def create_branch(self, tenant_id: str, code: str, name: str) -> BranchResult:
        """Create a branch."""

    async def get_scoped(self, entity_id: str, tenant_id: str) -> Any:
        """Return the branch entity if it belongs to tenant; CrossTenantAccessException otherwise."""


class IUserRepository(Protocol):
    """Protocol for users."""

    async def get_user(self, user_id: str) -> UserResult | None:
        """Return user by id."""

    async def get_by_external_id(self, external_id: str) -> UserResult | None:
        """Return user by hosted identity subject."""

    async def get_credentials(self, username: str) -> tuple[UserResult, str | None] | None:
        """Return (user, password hash) for local sign-in."""

    async def set_current_organization(
        self, user_id: str, organization_id: str | None
    ) -> None:
        """Persist the user's last selected organization."""


class ICustomerRepository(Protocol):
    """Protocol for customers (tenant-scoped)."""

    async def get_scoped(self, entity_id: str, tenant_id: str) -> Any:
        """Return the customer entity if it belongs to tenant; CrossTenantAccessException otherwise."""

    async def get_customer(self, customer_id: str, tenant_id: str) -> CustomerResult:
        """Return customer of tenant."""

    async def list_customers(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[CustomerResult]:
        """Return customers of tenant, newest first."""

    async def create_customer(
        self,
        tenant_id: str,
        first_name: str,
        last_name: str,
        *,
        branch_id: str | None = None,
        phone: str | None = None,
        email: str | None = None,
        national_id: str | None = None,
    ) -> CustomerResult:
        """Create a customer in tenant."""

    async def delete_customer(self, customer_id: str, tenant_id: str) -> None:
        """Delete customer of tenant."""


class ILoanRepository(Protocol):
    """Protocol for loans (tenant-scoped)."""

    async def get_loan(self, loan_id: str, tenant_id: str) -> LoanResult:
        """Return loan of tenant."""

    async def list_loans(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[LoanResult]:
        """Return loans of tenant, newest first."""

    async def create_loan(
        self,
        tenant_id: str,
        customer_id: str,
        principal: Decimal,
        interest_rate: Decimal,
        term_months: int,
    ) -> LoanResult:
        """Create a pending loan in tenant."""
