"""Organization repository. Read methods return OrganizationResult (DTO)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.organization import OrganizationResult
from app.domain.enums import OrganizationStatus
from app.domain.exceptions import OrganizationAlreadyExistsException
from app.infrastructure.persistence.models.organization import (
    Organization,
    OrganizationMember,
)
from app.infrastructure.persistence.repositories.base import BaseRepository


def _organization_to_result(o: Organization) -> OrganizationResult:
    return OrganizationResult(
        id=o.id,
        code=o.code,
        name=o.name,
        status=OrganizationStatus(o.status),
    )


class OrganizationRepository(BaseRepository[Organization]):
    """Organization (tenant) rows. Directory table: not subject to row-level security."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Organization)

    async def get_organization(self, organization_id: str) -> OrganizationResult | None:
        row = await self.get_by_id(organization_id)
        return _organization_to_result(row) if row else None

    async def get_by_code(self, code: str) -> OrganizationResult | None:
        result = await self.db.execute(
            select(Organization).where(Organization.code == code)
        )
        row = result.scalar_one_or_none()
        return _organization_to_result(row) if row else None

    async def create_organization(
        self, code: str, name: str, created_by: str | None
    ) -> OrganizationResult:
        """Create an organization; a duplicate code is OrganizationAlreadyExistsException."""
        org = Organization(
            code=code,
            name=name,
            status=OrganizationStatus.ACTIVE.value,
            created_by=created_by,
        )
        try:
            created = await self.create(org)
        except IntegrityError:
            raise OrganizationAlreadyExistsException(code) from None
        return _organization_to_result(created)

    async def list_for_user(self, user_id: str) -> list[OrganizationResult]:
        """Active organizations user_id is an active member of."""
        result = await self.db.execute(
            select(Organization)
            .join(OrganizationMember, OrganizationMember.tenant_id == Organization.id)
            .where(
                OrganizationMember.user_id == user_id,
                OrganizationMember.is_active.is_(True),
                Organization.status == OrganizationStatus.ACTIVE.value,
            )
            .order_by(Organization.name)
        )
        return [_organization_to_result(o) for o in result.scalars().all()]

    async def list_all(self) -> list[OrganizationResult]:
        result = await self.db.execute(select(Organization).order_by(Organization.name))
        return [_organization_to_result(o) for o in result.scalars().all()]
