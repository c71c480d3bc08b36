"""Tenant scoping value objects shared by the API and the client SDK."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """Active organization (and optional branch) that scopes data access."""

    tenant_id: str
    branch_id: str | None = None


@dataclass(frozen=True)
class RequestTenantContext:
    """Tenant context of one API request, bound to the authenticated caller.

    Built only after the caller's membership in tenant_id was verified.
    """

    tenant_id: str
    user_id: str
    branch_id: str | None = None
    is_super_admin: bool = False
