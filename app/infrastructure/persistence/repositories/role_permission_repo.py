"""RolePermission repository: role-permission links (single entity responsibility)."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import PermissionResult
from app.domain.exceptions import ConflictException
from app.infrastructure.persistence.models.permission import Permission, RolePermission
from app.infrastructure.persistence.repositories.permission_repo import (
    _permission_to_result,
)


class RolePermissionRepository:
    """Role-permission link table only. Read and full replacement of a role's grants."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.category, Permission.name)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def replace_role_permissions(
        self, role_id: str, permission_ids: Sequence[str]
    ) -> None:
        """Delete every link of role_id and insert permission_ids.

        Runs inside the caller's transaction, so readers see either the old or
        the new set. Callers must pass de-duplicated, existing permission ids.
        """
        await self.db.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        for permission_id in permission_ids:
            self.db.add(RolePermission(role_id=role_id, permission_id=permission_id))
        try:
            await self.db.flush()
        except IntegrityError:
            raise ConflictException(
                "Role permissions changed concurrently; retry",
                {"role_id": role_id},
            ) from None
