"""Permission catalog repository. Read methods return PermissionResult (DTO)."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import PermissionResult
from app.domain.permissions import CatalogEntry
from app.infrastructure.persistence.models.permission import Permission
from app.infrastructure.persistence.repositories.base import BaseRepository


def _permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        name=p.name,
        category=p.category,
        resource=p.resource,
        action=p.action,
        description=p.description,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Global catalog. Rows are written only by seeding."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def list_all(self) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission).order_by(Permission.category, Permission.name)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def get_by_ids(self, permission_ids: Sequence[str]) -> list[PermissionResult]:
        if not permission_ids:
            return []
        result = await self.db.execute(
            select(Permission).where(Permission.id.in_(list(permission_ids)))
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def upsert_catalog(self, entries: Sequence[CatalogEntry]) -> int:
        """Insert catalog entries that are not stored yet; return count inserted."""
        existing = await self.db.execute(select(Permission.name))
        known = {row[0] for row in existing.fetchall()}
        inserted = 0
        for entry in entries:
            if entry.name.value in known:
                continue
            self.db.add(
                Permission(
                    name=entry.name.value,
                    category=entry.category.value,
                    resource=entry.name.resource,
                    action=entry.name.action,
                    description=entry.description,
                )
            )
            inserted += 1
        if inserted:
            await self.db.flush()
        return inserted

    async def get_permission(self, permission_id: str) -> PermissionResult | None:
        row = await self.get_by_id(permission_id)
        return _permission_to_result(row) if row else None
