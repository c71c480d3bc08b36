"""DTOs for organization (tenant) use cases (no dependency on ORM)."""

from dataclasses import dataclass

from app.domain.enums import OrganizationStatus


@dataclass(frozen=True)
class OrganizationResult:
    """Organization read-model."""

    id: str
    code: str
    name: str
    status: OrganizationStatus


@dataclass(frozen=True)
class AccessibleOrganization:
    """Organization the caller can access, with the caller's role name there."""

    organization: OrganizationResult
    role_name: str | None


@dataclass(frozen=True)
class BranchResult:
    """Branch read-model."""

    id: str
    tenant_id: str
    code: str
    name: str
    is_active: bool


@dataclass(frozen=True)
class TenantSwitchResult:
    """Acknowledgement of a tenant switch."""

    organization_id: str
    role_name: str | None
