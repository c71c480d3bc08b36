"""Permissions API: read-only catalog grouped by category."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_permission_catalog_service, require_permission
from app.application.services.permission_catalog_service import (
    PermissionCatalogService,
)
from app.domain.permissions import PermissionName
from app.schemas.permission import PermissionCategoryGroup, PermissionResponse

router = APIRouter()


@router.get(
    "",
    response_model=list[PermissionCategoryGroup],
    dependencies=[Depends(require_permission(PermissionName.ROLES_VIEW))],
)
async def list_permissions(
    catalog: Annotated[
        PermissionCatalogService, Depends(get_permission_catalog_service)
    ],
):
    """Full catalog, categories sorted and entries sorted by name."""
    grouped = await catalog.list_permissions()
    return [
        PermissionCategoryGroup(
            category=category,
            permissions=[PermissionResponse.model_validate(p) for p in entries],
        )
        for category, entries in grouped.items()
    ]
