"""Organization (tenant) and branch API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.organization import AccessibleOrganization
from app.domain.enums import OrganizationStatus


class OrganizationCreateRequest(BaseModel):
    """Request body for POST /organizations."""

    code: str = Field(..., min_length=2, max_length=63, description="Unique slug")
    name: str = Field(..., min_length=1, max_length=255)


class OrganizationResponse(BaseModel):
    """Organization detail."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    status: OrganizationStatus


class AccessibleOrganizationResponse(OrganizationResponse):
    """Organization the caller can access, with the caller's role name there."""

    role_name: str | None = None

    @classmethod
    def from_result(cls, item: AccessibleOrganization) -> "AccessibleOrganizationResponse":
        org = item.organization
        return cls(
            id=org.id,
            code=org.code,
            name=org.name,
            status=org.status,
            role_name=item.role_name,
        )


class TenantSwitchResponse(BaseModel):
    """Acknowledgement of POST /organizations/{id}/switch."""

    model_config = ConfigDict(from_attributes=True)

    organization_id: str
    role_name: str | None = None


class BranchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    code: str
    name: str
    is_active: bool
