"""Tenant context dependency: scoping headers to RequestTenantContext (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.tenant_access_service import TenantAccessService
from app.core.config import get_settings
from app.domain.tenancy import RequestTenantContext
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import (
    BranchRepository,
    OrganizationRepository,
)

from .auth import CurrentIdentity


async def get_tenant_access_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantAccessService:
    """Tenant access checks with the app cache (short TTL) when available."""
    return TenantAccessService(
        organization_repo=OrganizationRepository(db),
        branch_repo=BranchRepository(db),
        cache=getattr(request.app.state, "cache", None),
    )


async def get_tenant_context(
    request: Request,
    identity: CurrentIdentity,
    tenant_access: Annotated[TenantAccessService, Depends(get_tenant_access_service)],
) -> RequestTenantContext:
    """Resolve the request tenant (and branch) from headers for the authenticated caller.

    400 on missing/malformed header, 404 on unknown organization or foreign
    branch, 403 when the caller is not a member.
    """
    settings = get_settings()
    return await tenant_access.resolve(
        identity,
        request.headers.get(settings.tenant_header_name),
        request.headers.get(settings.branch_header_name),
    )


TenantCtx = Annotated[RequestTenantContext, Depends(get_tenant_context)]
