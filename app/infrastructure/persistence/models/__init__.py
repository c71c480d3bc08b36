"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.lending import Customer, Loan
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TenantMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.organization import (
    Branch,
    Organization,
    OrganizationMember,
)
from app.infrastructure.persistence.models.permission import Permission, RolePermission
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.tenant_record import TenantRecordOwner
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.user_role_assignment import (
    UserRoleAssignment,
)

__all__ = [
    "Organization",
    "Branch",
    "OrganizationMember",
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "UserRoleAssignment",
    "Customer",
    "Loan",
    "TenantRecordOwner",
    "CuidMixin",
    "TenantMixin",
    "TimestampMixin",
    "MultiTenantModel",
]
