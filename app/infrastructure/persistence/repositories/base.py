"""Base repositories: generic CRUD with lifecycle hooks, and tenant-scoped access."""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import CrossTenantAccessException, ResourceNotFoundException
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.tenant_record import TenantRecordOwner

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update, delete and hooks.

    Subclasses override _on_after_create, _on_after_update, _on_before_delete
    for cache invalidation.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached record and run _on_after_update hook."""
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Run _on_before_delete hook then delete the record."""
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches or emit events."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches or emit events."""

    async def _on_before_delete(self, obj: ModelType) -> None:
        """Override in subclasses to invalidate caches or emit events."""


class TenantScopedRepository(BaseRepository[ModelType]):
    """Repository for tables carrying tenant_id.

    The owning tenant is read from tenant_record_owner, which row-level
    security does not cover, before the row itself is loaded. A record of
    another organization is therefore a CrossTenantAccessException rather
    than an empty result, even though the RLS-bound session cannot see it.
    """

    resource_type: str = "record"

    async def get_owner_tenant_id(self, entity_id: str) -> str | None:
        """Return the tenant owning entity_id in this table, or None if there is no such record."""
        result = await self.db.execute(
            select(TenantRecordOwner.tenant_id).where(
                TenantRecordOwner.record_table == self.model.__tablename__,
                TenantRecordOwner.record_id == entity_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_scoped(self, entity_id: str, tenant_id: str) -> ModelType:
        """Return the record if it belongs to tenant_id.

        Raises:
            ResourceNotFoundException: No record with this id.
            CrossTenantAccessException: Record belongs to another tenant.
        """
        owner = await self.get_owner_tenant_id(entity_id)
        if owner is None:
            raise ResourceNotFoundException(self.resource_type, entity_id)
        if owner != tenant_id:
            raise CrossTenantAccessException(self.resource_type, entity_id, tenant_id)
        obj = await self.get_by_id(entity_id)
        if obj is None:
            raise ResourceNotFoundException(self.resource_type, entity_id)
        return obj

    async def list_for_tenant(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> list[ModelType]:
        """Return records of tenant_id, newest first."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model)
            .where(model.tenant_id == tenant_id)
            .order_by(model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())
