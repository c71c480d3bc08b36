"""Organization membership repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.organization import OrganizationMember


class MembershipRepository:
    """Rows linking users to the organizations they may act in."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def is_active_member(self, tenant_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            select(OrganizationMember.id).where(
                OrganizationMember.tenant_id == tenant_id,
                OrganizationMember.user_id == user_id,
                OrganizationMember.is_active.is_(True),
            )
        )
        return result.first() is not None

    async def list_organization_ids_for_user(self, user_id: str) -> set[str]:
        result = await self.db.execute(
            select(OrganizationMember.tenant_id).where(
                OrganizationMember.user_id == user_id,
                OrganizationMember.is_active.is_(True),
            )
        )
        return {row[0] for row in result.fetchall()}

    async def add_member(self, tenant_id: str, user_id: str) -> None:
        """Add the membership, or reactivate it when it exists."""
        result = await self.db.execute(
            select(OrganizationMember).where(
                OrganizationMember.tenant_id == tenant_id,
                OrganizationMember.user_id == user_id,
            )
        )
        member = result.scalar_one_or_none()
        if member is None:
            self.db.add(OrganizationMember(tenant_id=tenant_id, user_id=user_id))
        else:
            member.is_active = True
        await self.db.flush()
