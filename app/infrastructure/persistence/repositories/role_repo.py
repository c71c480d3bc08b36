"""Role repository. Read methods return RoleResult (DTO); entity getters return ORM for writes."""

from __future__ import annotations

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleResult, RoleSummary
from app.domain.exceptions import ValidationException
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user_role_assignment import (
    UserRoleAssignment,
)
from app.infrastructure.persistence.repositories.base import BaseRepository


def _role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        name=r.name,
        description=r.description,
        hierarchy_level=r.hierarchy_level,
        is_system_role=r.is_system_role,
    )


def _visible_to(tenant_id: str):
    """Filter: system templates plus roles owned by tenant_id."""
    return or_(Role.tenant_id.is_(None), Role.tenant_id == tenant_id)


class RoleRepository(BaseRepository[Role]):
    """Role repository. Use get_entity_for_tenant for update/delete of organization roles."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def create_role(
        self,
        tenant_id: str | None,
        name: str,
        description: str | None,
        hierarchy_level: int,
        *,
        is_system_role: bool = False,
    ) -> RoleResult:
        """Create a role; return read-model DTO."""
        role = Role(
            tenant_id=tenant_id,
            name=name,
            description=description,
            hierarchy_level=hierarchy_level,
            is_system_role=is_system_role,
        )
        try:
            created = await self.create(role)
        except IntegrityError:
            raise ValidationException(
                f"Role name '{name}' already exists", field="name"
            ) from None
        return _role_to_result(created)

    async def get_visible(self, role_id: str, tenant_id: str) -> RoleResult | None:
        """Return role by id when it is a system template or owned by tenant."""
        result = await self.db.execute(
            select(Role).where(Role.id == role_id, _visible_to(tenant_id))
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def get_entity_for_tenant(self, role_id: str, tenant_id: str) -> Role | None:
        """Return tenant-owned role ORM, row-locked for the rest of the transaction."""
        result = await self.db.execute(
            select(Role)
            .where(Role.id == role_id, Role.tenant_id == tenant_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def find_visible_by_name(self, name: str, tenant_id: str) -> RoleResult | None:
        result = await self.db.execute(
            select(Role)
            .where(func.lower(Role.name) == name.lower(), _visible_to(tenant_id))
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def get_system_role_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(
            select(Role).where(Role.tenant_id.is_(None), Role.name == name)
        )
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def list_visible_with_user_count(self, tenant_id: str) -> list[RoleSummary]:
        """System templates plus tenant roles by hierarchy, with active holders in tenant."""
        user_count = func.count(UserRoleAssignment.id)
        q = (
            select(Role, user_count)
            .outerjoin(
                UserRoleAssignment,
                and_(
                    UserRoleAssignment.role_id == Role.id,
                    UserRoleAssignment.tenant_id == tenant_id,
                    UserRoleAssignment.is_active.is_(True),
                ),
            )
            .where(_visible_to(tenant_id))
            .group_by(Role.id)
            .order_by(Role.hierarchy_level, Role.name)
        )
        result = await self.db.execute(q)
        return [
            RoleSummary(role=_role_to_result(role), user_count=int(count or 0))
            for role, count in result.all()
        ]

    async def delete_role(self, role: Role) -> None:
        await self.delete(role)
