"""Branch repository. Read methods return BranchResult (DTO)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.organization import BranchResult
from app.domain.exceptions import ConflictException
from app.infrastructure.persistence.database import bind_tenant
from app.infrastructure.persistence.models.organization import Branch
from app.infrastructure.persistence.repositories.base import TenantScopedRepository


def _branch_to_result(b: Branch) -> BranchResult:
    return BranchResult(
        id=b.id,
        tenant_id=b.tenant_id,
        code=b.code,
        name=b.name,
        is_active=b.is_active,
    )


class BranchRepository(TenantScopedRepository[Branch]):
    resource_type = "branch"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Branch)

    async def get_branch(self, branch_id: str) -> BranchResult | None:
        row = await self.get_by_id(branch_id)
        return _branch_to_result(row) if row else None

    async def list_branches(self, tenant_id: str) -> list[BranchResult]:
        await bind_tenant(self.db, tenant_id)
        result = await self.db.execute(
            select(Branch).where(Branch.tenant_id == tenant_id).order_by(Branch.code)
        )
        return [_branch_to_result(b) for b in result.scalars().all()]

    async def create_branch(self, tenant_id: str, code: str, name: str) -> BranchResult:
        """Insert a branch, binding the transaction to its tenant so RLS admits the row.

        Organization creation inserts the first branch of a tenant the request
        was not scoped to.
        """
        await bind_tenant(self.db, tenant_id)
        try:
            created = await self.create(Branch(tenant_id=tenant_id, code=code, name=name))
        except IntegrityError:
            raise ConflictException(
                f"Branch code '{code}' already exists", {"code": code}
            ) from None
        return _branch_to_result(created)
