"""UserRoleAssignment repository: who holds which role in which organization."""

from __future__ import annotations

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import AssignmentResult, MemberRoleResult, RoleResult
from app.domain.exceptions import ConflictException
from app.infrastructure.persistence.models.organization import OrganizationMember
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.user_role_assignment import (
    UserRoleAssignment,
)
from app.infrastructure.persistence.repositories.role_repo import _role_to_result


def _assignment_to_result(a: UserRoleAssignment) -> AssignmentResult:
    return AssignmentResult(
        id=a.id,
        user_id=a.user_id,
        role_id=a.role_id,
        tenant_id=a.tenant_id,
        assigned_by=a.assigned_by,
        assigned_at=a.assigned_at,
        is_active=a.is_active,
    )


class UserRoleAssignmentRepository:
    """Assignment rows. At most one active row per (user, tenant), enforced by a partial unique index."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_active_role(self, user_id: str, tenant_id: str) -> RoleResult | None:
        """Return the actively held role; None when unassigned or ambiguous."""
        result = await self.db.execute(
            select(Role)
            .join(UserRoleAssignment, UserRoleAssignment.role_id == Role.id)
            .where(
                UserRoleAssignment.user_id == user_id,
                UserRoleAssignment.tenant_id == tenant_id,
                UserRoleAssignment.is_active.is_(True),
            )
            .limit(2)
        )
        rows = list(result.scalars().all())
        if len(rows) != 1:
            return None
        return _role_to_result(rows[0])

    async def lock_active_assignments(
        self, user_id: str, tenant_id: str
    ) -> list[UserRoleAssignment]:
        """Lock the user's active rows so concurrent reassignments serialize."""
        result = await self.db.execute(
            select(UserRoleAssignment)
            .where(
                UserRoleAssignment.user_id == user_id,
                UserRoleAssignment.tenant_id == tenant_id,
                UserRoleAssignment.is_active.is_(True),
            )
            .with_for_update()
        )
        return list(result.scalars().all())

    async def deactivate_active(self, user_id: str, tenant_id: str) -> int:
        result = await self.db.execute(
            update(UserRoleAssignment)
            .where(
                UserRoleAssignment.user_id == user_id,
                UserRoleAssignment.tenant_id == tenant_id,
                UserRoleAssignment.is_active.is_(True),
            )
            .values(is_active=False)
        )
        return int(result.rowcount or 0)

    async def create_assignment(
        self,
        user_id: str,
        role_id: str,
        tenant_id: str,
        assigned_by: str | None,
    ) -> AssignmentResult:
        """Insert the active assignment; a concurrent active row is a ConflictException."""
        assignment = UserRoleAssignment(
            tenant_id=tenant_id,
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            is_active=True,
        )
        try:
            self.db.add(assignment)
            await self.db.flush()
            await self.db.refresh(assignment)
        except IntegrityError:
            raise ConflictException(
                "User already has an active role in this organization",
                {"user_id": user_id, "tenant_id": tenant_id},
            ) from None
        return _assignment_to_result(assignment)

    async def count_active_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count(UserRoleAssignment.id)).where(
                UserRoleAssignment.role_id == role_id,
                UserRoleAssignment.is_active.is_(True),
            )
        )
        return int(result.scalar_one() or 0)

    async def list_active_user_ids_for_role(
        self, role_id: str, tenant_id: str
    ) -> list[str]:
        result = await self.db.execute(
            select(UserRoleAssignment.user_id).where(
                UserRoleAssignment.role_id == role_id,
                UserRoleAssignment.tenant_id == tenant_id,
                UserRoleAssignment.is_active.is_(True),
            )
        )
        return [row[0] for row in result.fetchall()]

    async def list_members_with_roles(self, tenant_id: str) -> list[MemberRoleResult]:
        """Active members of tenant with their active role (outer join)."""
        q = (
            select(User, Role)
            .join(
                OrganizationMember,
                and_(
                    OrganizationMember.user_id == User.id,
                    OrganizationMember.tenant_id == tenant_id,
                    OrganizationMember.is_active.is_(True),
                ),
            )
            .outerjoin(
                UserRoleAssignment,
                and_(
                    UserRoleAssignment.user_id == User.id,
                    UserRoleAssignment.tenant_id == tenant_id,
                    UserRoleAssignment.is_active.is_(True),
                ),
            )
            .outerjoin(Role, Role.id == UserRoleAssignment.role_id)
            .order_by(User.username)
        )
        result = await self.db.execute(q)
        return [
            MemberRoleResult(
                user_id=user.id,
                username=user.username,
                email=user.email,
                full_name=user.full_name,
                role_id=role.id if role else None,
                role_name=role.name if role else None,
                hierarchy_level=role.hierarchy_level if role else None,
            )
            for user, role in result.all()
        ]

    async def get_active_role_names_for_user(self, user_id: str) -> dict[str, str]:
        result = await self.db.execute(
            select(UserRoleAssignment.tenant_id, Role.name)
            .join(Role, Role.id == UserRoleAssignment.role_id)
            .where(
                UserRoleAssignment.user_id == user_id,
                UserRoleAssignment.is_active.is_(True),
            )
        )
        return {tenant_id: name for tenant_id, name in result.all()}
