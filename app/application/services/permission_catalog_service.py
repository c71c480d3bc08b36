"""Permission catalog service: read-only catalog access for tenants."""

from __future__ import annotations

from collections.abc import Sequence

from app.application.dtos.permission import PermissionResult
from app.application.interfaces.repositories import IPermissionRepository
from app.domain.exceptions import ResourceNotFoundException
from app.domain.permissions import validate_catalog


class PermissionCatalogService:
    """Lists and resolves catalog entries. Tenants never mutate the catalog."""

    def __init__(self, permission_repo: IPermissionRepository) -> None:
        self._repo = permission_repo

    async def list_permissions(self) -> dict[str, list[PermissionResult]]:
        """Return catalog entries grouped by category (categories and names sorted).

        Raises:
            ValidationException: If a stored entry is not a known permission name.
        """
        entries = await self._repo.list_all()
        validate_catalog(e.name for e in entries)
        grouped: dict[str, list[PermissionResult]] = {}
        for entry in sorted(entries, key=lambda e: (e.category, e.name)):
            grouped.setdefault(entry.category, []).append(entry)
        return grouped

    async def get_permission(self, permission_id: str) -> PermissionResult:
        permission = await self._repo.get_permission(permission_id)
        if permission is None:
            raise ResourceNotFoundException("permission", permission_id)
        return permission

    async def resolve_permission_ids(
        self, permission_ids: Sequence[str]
    ) -> list[PermissionResult]:
        """Return catalog entries for permission_ids, de-duplicated in request order.

        Raises:
            ResourceNotFoundException: For the first id not in the catalog.
        """
        unique_ids = list(dict.fromkeys(permission_ids))
        found = {p.id: p for p in await self._repo.get_by_ids(unique_ids)}
        for permission_id in unique_ids:
            if permission_id not in found:
                raise ResourceNotFoundException("permission", permission_id)
        validate_catalog(found[pid].name for pid in unique_ids)
        return [found[pid] for pid in unique_ids]
