"""Domain layer: permission catalog, authorization model, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application,
infrastructure, API and client layers.
"""

from app.domain.authorization import (
    RoleGrant,
    UserPermissionsView,
    build_permissions_view,
    can_assign_role,
    can_manage_user,
    has_any_role,
    has_minimum_role,
    has_permission,
)
from app.domain.enums import LoanStatus, OrganizationStatus, TenantResolutionState
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationDenied,
    ConflictException,
    CrossTenantAccessException,
    MoneyflowException,
    ResourceNotFoundException,
    TenantUnresolvedException,
    ValidationException,
)
from app.domain.permissions import (
    PERMISSION_CATALOG,
    PermissionCategory,
    PermissionName,
    validate_catalog,
    validate_permission_name,
)
from app.domain.tenancy import RequestTenantContext, TenantContext

__all__ = [
    # Authorization
    "RoleGrant",
    "UserPermissionsView",
    "build_permissions_view",
    "can_assign_role",
    "can_manage_user",
    "has_any_role",
    "has_minimum_role",
    "has_permission",
    # Enums
    "LoanStatus",
    "OrganizationStatus",
    "TenantResolutionState",
    # Exceptions
    "AuthenticationException",
    "AuthorizationDenied",
    "ConflictException",
    "CrossTenantAccessException",
    "MoneyflowException",
    "ResourceNotFoundException",
    "TenantUnresolvedException",
    "ValidationException",
    # Permission catalog
    "PERMISSION_CATALOG",
    "PermissionCategory",
    "PermissionName",
    "validate_catalog",
    "validate_permission_name",
    # Tenancy
    "RequestTenantContext",
    "TenantContext",
]
