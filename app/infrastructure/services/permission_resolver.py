"""Loads the rows a UserPermissionsView is projected from (implements IPermissionResolver)."""

from __future__ import annotations

import logging
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.authorization import RoleGrant
from app.infrastructure.persistence.models.permission import Permission, RolePermission
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.user_role_assignment import (
    UserRoleAssignment,
)

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Resolves active role grants by querying assignments, roles and role_permission."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_role_grants(self, user_id: str, tenant_id: str) -> list[RoleGrant]:
        """Return one RoleGrant per active assignment of user_id in tenant_id.

        More than one row means the single-active-assignment constraint was
        bypassed; the rows are returned as-is and the projection fails closed.
        """
        roles_result = await self.db.execute(
            select(Role.id, Role.name, Role.hierarchy_level)
            .join(UserRoleAssignment, UserRoleAssignment.role_id == Role.id)
            .where(
                UserRoleAssignment.user_id == user_id,
                UserRoleAssignment.tenant_id == tenant_id,
                UserRoleAssignment.is_active.is_(True),
            )
        )
        roles = roles_result.all()
        if not roles:
            return []
        if len(roles) > 1:
            logger.warning(
                "User %s has %d active role assignments in tenant %s",
                user_id,
                len(roles),
                tenant_id,
            )
        role_ids = [r.id for r in roles]
        perms_result = await self.db.execute(
            select(RolePermission.role_id, Permission.name)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(RolePermission.role_id.in_(role_ids))
        )
        names: dict[str, set[str]] = defaultdict(set)
        for role_id, name in perms_result.all():
            names[role_id].add(name)
        return [
            RoleGrant(
                role_id=r.id,
                role_name=r.name,
                hierarchy_level=r.hierarchy_level,
                permissions=frozenset(names[r.id]),
            )
            for r in roles
        ]

    async def is_super_admin(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(User.is_super_admin).where(
                User.id == user_id, User.is_active.is_(True)
            )
        )
        return bool(result.scalar_one_or_none())
