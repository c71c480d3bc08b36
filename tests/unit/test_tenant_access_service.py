"""Unit tests for TenantAccessService (membership, status, branch scoping, lookup cache)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos.organization import BranchResult, OrganizationResult
from app.application.dtos.user import Identity
from app.application.services.tenant_access_service import TenantAccessService
from app.core.cache_keys import tenant_key
from app.core.constants import TENANT_CACHE_MISS_MARKER
from app.domain.enums import OrganizationStatus
from app.domain.exceptions import (
    AuthorizationDenied,
    CrossTenantAccessException,
    ResourceNotFoundException,
    ValidationException,
)

ORG_A = OrganizationResult("org-a", "alpha", "Alpha Microfinance", OrganizationStatus.ACTIVE)
ORG_S = OrganizationResult("org-s", "sus", "Suspended Co", OrganizationStatus.SUSPENDED)

MEMBER = Identity(user_id="user-1", organization_ids=frozenset({"org-a", "org-s"}))
OUTSIDER = Identity(user_id="user-2", organization_ids=frozenset({"org-z"}))
ROOT = Identity(user_id="user-root", is_super_admin=True)


def _service(cache: MagicMock | None = None) -> tuple[TenantAccessService, AsyncMock, AsyncMock]:
    org_repo = AsyncMock()
    org_repo.get_organization.side_effect = lambda tid: {"org-a": ORG_A, "org-s": ORG_S}.get(tid)
    branch_repo = AsyncMock()
    branch_repo.get_branch.side_effect = lambda bid: {
        "br-a": BranchResult("br-a", "org-a", "MAIN", "Main", True),
        "br-z": BranchResult("br-z", "org-z", "MAIN", "Main", True),
    }.get(bid)
    return TenantAccessService(org_repo, branch_repo, cache=cache), org_repo, branch_repo


async def test_resolve_member_context() -> None:
    service, _, _ = _service()
    ctx = await service.resolve(MEMBER, "org-a", "br-a")
    assert ctx.tenant_id == "org-a"
    assert ctx.user_id == "user-1"
    assert ctx.branch_id == "br-a"
    assert ctx.is_super_admin is False


@pytest.mark.parametrize("header", [None, ""])
async def test_missing_tenant_header(header: str | None) -> None:
    service, _, _ = _service()
    with pytest.raises(ValidationException) as exc_info:
        await service.resolve(MEMBER, header)
    assert exc_info.value.details == {"field": "tenant_id"}


@pytest.mark.parametrize("header", ["org a", "org;drop", "x" * 65, "org/../b"])
async def test_malformed_tenant_header(header: str) -> None:
    service, org_repo, _ = _service()
    with pytest.raises(ValidationException):
        await service.resolve(MEMBER, header)
    org_repo.get_organization.assert_not_awaited()


async def test_unknown_organization_not_found() -> None:
    service, _, _ = _service()
    with pytest.raises(ResourceNotFoundException):
        await service.resolve(MEMBER, "org-missing")


async def test_non_member_cross_tenant_denied() -> None:
    service, _, _ = _service()
    with pytest.raises(CrossTenantAccessException) as exc_info:
        await service.resolve(OUTSIDER, "org-a")
    assert exc_info.value.error_code == "PERMISSION_DENIED"
    assert exc_info.value.message == "Insufficient permission"


async def test_suspended_organization_denied_for_members() -> None:
    service, _, _ = _service()
    with pytest.raises(AuthorizationDenied):
        await service.resolve(MEMBER, "org-s")


async def test_super_admin_reaches_any_organization() -> None:
    service, _, _ = _service()
    ctx = await service.resolve(ROOT, "org-s")
    assert ctx.is_super_admin is True


async def test_branch_of_other_tenant_not_found() -> None:
    """A branch id from another organization is reported as unknown."""
    service, _, _ = _service()
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await service.resolve(MEMBER, "org-a", "br-z")
    assert exc_info.value.details["resource_type"] == "branch"


async def test_malformed_branch_header() -> None:
    service, _, branch_repo = _service()
    with pytest.raises(ValidationException):
        await service.resolve(MEMBER, "org-a", "br a")
    branch_repo.get_branch.assert_not_awaited()


async def test_organization_lookup_cached(mock_cache: MagicMock) -> None:
    service, org_repo, _ = _service(cache=mock_cache)
    await service.ensure_access(MEMBER, "org-a")
    org = await service.ensure_access(MEMBER, "org-a")
    assert org == ORG_A
    org_repo.get_organization.assert_awaited_once_with("org-a")


async def test_missing_organization_negative_cached(mock_cache: MagicMock) -> None:
    service, org_repo, _ = _service(cache=mock_cache)
    for _ in range(2):
        with pytest.raises(ResourceNotFoundException):
            await service.ensure_access(MEMBER, "org-gone")
    assert mock_cache.store[tenant_key("org-gone")] == TENANT_CACHE_MISS_MARKER
    assert org_repo.get_organization.await_count == 1
