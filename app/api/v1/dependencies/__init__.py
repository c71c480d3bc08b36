"""API dependencies (composition root): sessions, identity, tenant context, guards, services."""

from app.api.v1.dependencies.auth import (
    CurrentIdentity,
    get_current_identity,
    get_identity_service,
    get_identity_verifier,
)
from app.api.v1.dependencies.db import ReadSession, WriteSession
from app.api.v1.dependencies.rbac import (
    PermissionsView,
    get_authorization_service,
    get_permissions_view,
    require_any_role,
    require_minimum_role,
    require_permission,
)
from app.api.v1.dependencies.services import (
    get_customer_service,
    get_customer_service_for_read,
    get_loan_service,
    get_loan_service_for_read,
    get_organization_service,
    get_organization_service_for_read,
    get_permission_catalog_service,
    get_role_service,
    get_role_service_for_read,
    get_user_role_service,
    get_user_role_service_for_read,
)
from app.api.v1.dependencies.tenant import (
    TenantCtx,
    get_tenant_access_service,
    get_tenant_context,
)

__all__ = [
    "CurrentIdentity",
    "PermissionsView",
    "ReadSession",
    "TenantCtx",
    "WriteSession",
    "get_authorization_service",
    "get_current_identity",
    "get_customer_service",
    "get_customer_service_for_read",
    "get_identity_service",
    "get_identity_verifier",
    "get_loan_service",
    "get_loan_service_for_read",
    "get_organization_service",
    "get_organization_service_for_read",
    "get_permission_catalog_service",
    "get_permissions_view",
    "get_role_service",
    "get_role_service_for_read",
    "get_tenant_access_service",
    "get_tenant_context",
    "get_user_role_service",
    "get_user_role_service_for_read",
    "require_any_role",
    "require_minimum_role",
    "require_permission",
]
