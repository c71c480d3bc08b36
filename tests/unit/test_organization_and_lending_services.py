"""Unit tests for OrganizationService and the tenant-scoped customer and loan services."""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.organization import OrganizationResult
from app.application.dtos.role import RoleResult
from app.application.dtos.user import Identity
from app.application.services.lending_service import CustomerService, LoanService
from app.application.services.organization_service import (
    DEFAULT_BRANCH_CODE,
    OrganizationService,
)
from app.domain.enums import OrganizationStatus
from app.domain.exceptions import (
    CrossTenantAccessException,
    OrganizationAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.tenancy import RequestTenantContext

CREATOR = Identity(user_id="user-1")
ADMIN_TEMPLATE = RoleResult("role-admin", None, "admin", None, 2, True)
NEW_ORG = OrganizationResult("org-new", "gamma", "Gamma", OrganizationStatus.ACTIVE)
CTX = RequestTenantContext(tenant_id="org-a", user_id="user-1")


@pytest.fixture
def org_deps() -> SimpleNamespace:
    organization_repo = AsyncMock()
    organization_repo.get_by_code.return_value = None
    organization_repo.create_organization.return_value = NEW_ORG
    role_repo = AsyncMock()
    role_repo.get_system_role_by_name.return_value = ADMIN_TEMPLATE
    return SimpleNamespace(
        organization_repo=organization_repo,
        membership_repo=AsyncMock(),
        branch_repo=AsyncMock(),
        user_repo=AsyncMock(),
        role_repo=role_repo,
        assignment_repo=AsyncMock(),
        tenant_access=AsyncMock(),
    )


def _org_service(deps: SimpleNamespace) -> OrganizationService:
    return OrganizationService(**vars(deps))


async def test_create_organization_onboards_creator(org_deps: SimpleNamespace) -> None:
    """Creator becomes a member with the admin template role, in a default branch."""
    org = await _org_service(org_deps).create_organization(CREATOR, " Gamma ", "Gamma")
    assert org == NEW_ORG
    org_deps.organization_repo.create_organization.assert_awaited_once_with(
        code="gamma", name="Gamma", created_by="user-1"
    )
    org_deps.membership_repo.add_member.assert_awaited_once_with("org-new", "user-1")
    org_deps.assignment_repo.create_assignment.assert_awaited_once_with(
        user_id="user-1", role_id="role-admin", tenant_id="org-new", assigned_by="user-1"
    )
    assert org_deps.branch_repo.create_branch.await_args.args[:2] == (
        "org-new",
        DEFAULT_BRANCH_CODE,
    )
    org_deps.user_repo.set_current_organization.assert_awaited_once_with("user-1", "org-new")


async def test_create_organization_duplicate_code(org_deps: SimpleNamespace) -> None:
    org_deps.organization_repo.get_by_code.return_value = NEW_ORG
    with pytest.raises(OrganizationAlreadyExistsException):
        await _org_service(org_deps).create_organization(CREATOR, "gamma", "Gamma")
    org_deps.organization_repo.create_organization.assert_not_awaited()


@pytest.mark.parametrize(
    ("code", "name"), [("g", "Gamma"), ("has space", "Gamma"), ("gamma", " ")]
)
async def test_create_organization_invalid_input(
    org_deps: SimpleNamespace, code: str, name: str
) -> None:
    with pytest.raises(ValidationException):
        await _org_service(org_deps).create_organization(CREATOR, code, name)


async def test_create_organization_without_seeded_admin_template(
    org_deps: SimpleNamespace,
) -> None:
    org_deps.role_repo.get_system_role_by_name.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await _org_service(org_deps).create_organization(CREATOR, "gamma", "Gamma")


async def test_switch_checks_access_and_remembers_selection(org_deps: SimpleNamespace) -> None:
    org_deps.assignment_repo.get_active_role.return_value = ADMIN_TEMPLATE
    result = await _org_service(org_deps).switch(CREATOR, "org-a")
    org_deps.tenant_access.ensure_access.assert_awaited_once_with(CREATOR, "org-a")
    org_deps.user_repo.set_current_organization.assert_awaited_once_with("user-1", "org-a")
    assert result.role_name == "admin"


async def test_switch_to_non_member_organization(org_deps: SimpleNamespace) -> None:
    org_deps.tenant_access.ensure_access.side_effect = CrossTenantAccessException(
        "organization", "org-b", None
    )
    with pytest.raises(CrossTenantAccessException):
        await _org_service(org_deps).switch(CREATOR, "org-b")
    org_deps.user_repo.set_current_organization.assert_not_awaited()


async def test_super_admin_lists_every_organization(org_deps: SimpleNamespace) -> None:
    org_deps.organization_repo.list_all.return_value = [NEW_ORG]
    org_deps.assignment_repo.get_active_role_names_for_user.return_value = {}
    items = await _org_service(org_deps).list_accessible(
        Identity(user_id="root", is_super_admin=True)
    )
    assert [i.organization.id for i in items] == ["org-new"]
    assert items[0].role_name is None
    org_deps.organization_repo.list_for_user.assert_not_awaited()


async def test_create_customer_defaults_to_request_branch() -> None:
    customer_repo = AsyncMock()
    branch_repo = AsyncMock()
    ctx = RequestTenantContext(tenant_id="org-a", user_id="user-1", branch_id="br-a")
    await CustomerService(customer_repo, branch_repo).create_customer(ctx, " Grace ", "Achieng")
    branch_repo.get_scoped.assert_awaited_once_with("br-a", "org-a")
    assert customer_repo.create_customer.await_args.args == ("org-a", "Grace", "Achieng")
    assert customer_repo.create_customer.await_args.kwargs["branch_id"] == "br-a"


async def test_create_customer_in_foreign_branch_denied() -> None:
    customer_repo = AsyncMock()
    branch_repo = AsyncMock()
    branch_repo.get_scoped.side_effect = CrossTenantAccessException("branch", "br-b", "org-a")
    with pytest.raises(CrossTenantAccessException):
        await CustomerService(customer_repo, branch_repo).create_customer(
            CTX, "Grace", "Achieng", branch_id="br-b"
        )
    customer_repo.create_customer.assert_not_awaited()


async def test_create_loan_for_foreign_customer_denied() -> None:
    loan_repo = AsyncMock()
    customer_repo = AsyncMock()
    customer_repo.get_scoped.side_effect = CrossTenantAccessException(
        "customer", "cust-b", "org-a"
    )
    with pytest.raises(CrossTenantAccessException):
        await LoanService(loan_repo, customer_repo).create_loan(
            CTX, "cust-b", Decimal("1000.00"), Decimal("0.150"), 12
        )
    loan_repo.create_loan.assert_not_awaited()


@pytest.mark.parametrize(
    ("principal", "rate", "term"),
    [
        (Decimal("0"), Decimal("0.1"), 12),
        (Decimal("10"), Decimal("-0.1"), 12),
        (Decimal("10"), Decimal("0"), 0),
    ],
)
async def test_create_loan_validation(principal: Decimal, rate: Decimal, term: int) -> None:
    with pytest.raises(ValidationException):
        await LoanService(AsyncMock(), AsyncMock()).create_loan(
            CTX, "cust-1", principal, rate, term
        )


async def test_member_listing_omits_suspended_organizations(org_deps: SimpleNamespace) -> None:
    suspended = OrganizationResult(
        "org-s", "alpha-s", "Alpha Suspended", OrganizationStatus.SUSPENDED
    )
    org_deps.organization_repo.list_for_user.return_value = [suspended, NEW_ORG]
    org_deps.assignment_repo.get_active_role_names_for_user.return_value = {"org-s": "manager"}
    items = await _org_service(org_deps).list_accessible(CREATOR)
    assert [i.organization.id for i in items] == ["org-new"]
