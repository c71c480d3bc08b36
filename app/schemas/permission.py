"""Permission catalog API schemas."""

from pydantic import BaseModel, ConfigDict


class PermissionResponse(BaseModel):
    """One catalog entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    resource: str
    action: str
    description: str | None = None


class PermissionCategoryGroup(BaseModel):
    """Catalog entries of one category (GET /permissions)."""

    category: str
    permissions: list[PermissionResponse]
