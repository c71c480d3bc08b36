"""Application services: authorization, roles, assignments, organizations, identity, lending."""

from app.application.services.authorization_service import AuthorizationService
from app.application.services.identity_service import IdentityService
from app.application.services.lending_service import CustomerService, LoanService
from app.application.services.organization_service import OrganizationService
from app.application.services.permission_catalog_service import (
    PermissionCatalogService,
)
from app.application.services.role_service import RoleService
from app.application.services.tenant_access_service import TenantAccessService
from app.application.services.user_role_service import UserRoleService

__all__ = [
    "AuthorizationService",
    "CustomerService",
    "IdentityService",
    "LoanService",
    "OrganizationService",
    "PermissionCatalogService",
    "RoleService",
    "TenantAccessService",
    "UserRoleService",
]
