"""Tenant access: decides whether an identity may act inside an organization."""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.organization import OrganizationResult
from app.application.dtos.user import Identity
from app.application.interfaces.repositories import (
    IBranchRepository,
    IOrganizationRepository,
)
from app.application.interfaces.services import ICacheService
from app.core.cache_keys import tenant_key
from app.core.constants import TENANT_CACHE_MISS_MARKER, TENANT_VALIDATION_CACHE_TTL
from app.core.tenant_validation import is_valid_scope_id_format
from app.domain.enums import OrganizationStatus
from app.domain.exceptions import (
    AuthorizationDenied,
    CrossTenantAccessException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.tenancy import RequestTenantContext

logger = logging.getLogger(__name__)


def _organization_to_dict(org: OrganizationResult) -> dict[str, Any]:
    return {"id": org.id, "code": org.code, "name": org.name, "status": org.status.value}


def _organization_from_dict(data: dict[str, Any]) -> OrganizationResult:
    return OrganizationResult(
        id=data["id"],
        code=data["code"],
        name=data["name"],
        status=OrganizationStatus(data["status"]),
    )


class TenantAccessService:
    """Resolves the request tenant context for an authenticated identity.

    Organization lookups are cached briefly (including misses) since every
    tenant-scoped request performs one.
    """

    def __init__(
        self,
        organization_repo: IOrganizationRepository,
        branch_repo: IBranchRepository,
        cache: ICacheService | None = None,
    ) -> None:
        self._organization_repo = organization_repo
        self._branch_repo = branch_repo
        self._cache = cache

    async def _get_organization(self, tenant_id: str) -> OrganizationResult | None:
        key = tenant_key(tenant_id)
        use_cache = self._cache is not None and self._cache.is_available()
        if use_cache:
            cached = await self._cache.get(key)
            if cached == TENANT_CACHE_MISS_MARKER:
                return None
            if cached is not None:
                return _organization_from_dict(cached)
        org = await self._organization_repo.get_organization(tenant_id)
        if use_cache:
            value: Any = (
                _organization_to_dict(org) if org is not None else TENANT_CACHE_MISS_MARKER
            )
            await self._cache.set(key, value, ttl=TENANT_VALIDATION_CACHE_TTL)
        return org

    async def ensure_access(self, identity: Identity, tenant_id: str) -> OrganizationResult:
        """Return the organization if identity may act in it.

        Raises:
            ResourceNotFoundException: Organization does not exist.
            CrossTenantAccessException: Identity is not an active member.
            AuthorizationDenied: Organization is suspended (super admins excepted).
        """
        org = await self._get_organization(tenant_id)
        if org is None:
            raise ResourceNotFoundException("organization", tenant_id)
        if identity.is_super_admin:
            return org
        if not identity.is_member_of(tenant_id):
            raise CrossTenantAccessException("organization", tenant_id, None)
        if org.status != OrganizationStatus.ACTIVE:
            raise AuthorizationDenied(reason=f"organization {tenant_id} is {org.status.value}")
        return org

    async def resolve(
        self,
        identity: Identity,
        tenant_id: str | None,
        branch_id: str | None = None,
    ) -> RequestTenantContext:
        """Build the RequestTenantContext from the scoping headers.

        Raises:
            ValidationException: Missing or malformed tenant or branch id.
            ResourceNotFoundException: Unknown organization, or branch not in it.
            CrossTenantAccessException: Identity is not a member of the organization.
        """
        if not tenant_id:
            raise ValidationException("Tenant header is required", field="tenant_id")
        if not is_valid_scope_id_format(tenant_id):
            raise ValidationException("Invalid tenant id format", field="tenant_id")
        await self.ensure_access(identity, tenant_id)
        if branch_id is not None:
            if not is_valid_scope_id_format(branch_id):
                raise ValidationException("Invalid branch id format", field="branch_id")
            branch = await self._branch_repo.get_branch(branch_id)
            if branch is None or branch.tenant_id != tenant_id:
                raise ResourceNotFoundException("branch", branch_id)
        return RequestTenantContext(
            tenant_id=tenant_id,
            user_id=identity.user_id,
            branch_id=branch_id,
            is_super_admin=identity.is_super_admin,
        )
