"""API tests for tenant scoping: header resolution, membership, organizations, records.

The tenant context dependency runs for real on top of a TenantAccessService
with mocked repositories; services below it are replaced.
"""

import logging
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_authorization_service,
    get_current_identity,
    get_customer_service,
    get_customer_service_for_read,
    get_loan_service,
    get_loan_service_for_read,
    get_organization_service,
    get_organization_service_for_read,
    get_tenant_access_service,
)
from app.application.dtos.lending import CustomerResult, LoanResult
from app.application.dtos.organization import (
    AccessibleOrganization,
    BranchResult,
    OrganizationResult,
    TenantSwitchResult,
)
from app.application.dtos.user import Identity
from app.application.services.organization_service import OrganizationService
from app.application.services.tenant_access_service import TenantAccessService
from app.domain.enums import LoanStatus, OrganizationStatus
from app.domain.exceptions import CrossTenantAccessException, ResourceNotFoundException
from app.domain.permissions import PermissionName
from app.main import app

ORG_A = OrganizationResult("org-a", "alpha", "Alpha", OrganizationStatus.ACTIVE)
ORG_B = OrganizationResult("org-b", "beta", "Beta", OrganizationStatus.ACTIVE)

MEMBER_OF_A = Identity(user_id="user-1", organization_ids=frozenset({"org-a"}))


def _customer(customer_id: str, tenant_id: str = "org-a") -> CustomerResult:
    return CustomerResult(
        id=customer_id,
        tenant_id=tenant_id,
        branch_id=None,
        first_name="Grace",
        last_name="Achieng",
        phone=None,
        email=None,
        national_id=None,
        created_at=None,
    )


@pytest.fixture
def scoped(view_factory) -> AsyncMock:
    """Authenticated member of org-a; real tenant resolution; mocked customer service."""
    org_repo = AsyncMock()
    org_repo.get_organization.side_effect = lambda tid: {"org-a": ORG_A, "org-b": ORG_B}.get(tid)
    branch_repo = AsyncMock()
    branch_repo.get_branch.side_effect = lambda bid: {
        "br-a": BranchResult("br-a", "org-a", "MAIN", "Main", True),
        "br-b": BranchResult("br-b", "org-b", "MAIN", "Main", True),
    }.get(bid)
    tenant_access = TenantAccessService(org_repo, branch_repo)

    authorization = AsyncMock()
    authorization.get_permissions_view.side_effect = lambda user_id, tenant_id: view_factory(
        [PermissionName.CUSTOMERS_VIEW], user_id=user_id, tenant_id=tenant_id
    )
    customers = AsyncMock()
    customers.list_customers.return_value = [_customer("cust-1")]

    app.dependency_overrides[get_current_identity] = lambda: MEMBER_OF_A
    app.dependency_overrides[get_tenant_access_service] = lambda: tenant_access
    app.dependency_overrides[get_authorization_service] = lambda: authorization
    app.dependency_overrides[get_customer_service_for_read] = lambda: customers
    app.dependency_overrides[get_customer_service] = lambda: customers
    return customers


async def test_records_scoped_to_header_tenant(client: AsyncClient, scoped: AsyncMock) -> None:
    response = await client.get("/api/v1/customers", headers={"X-Tenant-ID": "org-a"})
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ["cust-1"]
    ctx = scoped.list_customers.await_args.args[0]
    assert ctx.tenant_id == "org-a"
    assert ctx.user_id == "user-1"


async def test_missing_tenant_header_is_400(client: AsyncClient, scoped: AsyncMock) -> None:
    response = await client.get("/api/v1/customers")
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "tenant_id"}
    scoped.list_customers.assert_not_awaited()


async def test_malformed_tenant_header_is_400(client: AsyncClient, scoped: AsyncMock) -> None:
    response = await client.get("/api/v1/customers", headers={"X-Tenant-ID": "org-a' OR 1=1"})
    assert response.status_code == 400


async def test_other_tenant_header_is_403(client: AsyncClient, scoped: AsyncMock) -> None:
    """A member of org-a naming org-b is refused, never silently filtered."""
    response = await client.get("/api/v1/customers", headers={"X-Tenant-ID": "org-b"})
    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permission"
    assert "org-b" not in response.text
    scoped.list_customers.assert_not_awaited()


async def test_unknown_tenant_header_is_404(client: AsyncClient, scoped: AsyncMock) -> None:
    response = await client.get("/api/v1/customers", headers={"X-Tenant-ID": "org-nowhere"})
    assert response.status_code == 404


async def test_branch_of_other_tenant_is_404(client: AsyncClient, scoped: AsyncMock) -> None:
    response = await client.get(
        "/api/v1/customers", headers={"X-Tenant-ID": "org-a", "X-Branch-ID": "br-b"}
    )
    assert response.status_code == 404


async def test_branch_header_reaches_context(client: AsyncClient, scoped: AsyncMock) -> None:
    response = await client.get(
        "/api/v1/customers", headers={"X-Tenant-ID": "org-a", "X-Branch-ID": "br-a"}
    )
    assert response.status_code == 200
    assert scoped.list_customers.await_args.args[0].branch_id == "br-a"


async def test_foreign_record_id_is_403(client: AsyncClient, scoped: AsyncMock) -> None:
    scoped.get_customer.side_effect = CrossTenantAccessException("customer", "cust-b", "org-a")
    response = await client.get("/api/v1/customers/cust-b", headers={"X-Tenant-ID": "org-a"})
    assert response.status_code == 403
    assert "cust-b" not in response.text


async def test_create_customer_requires_permission(
    client: AsyncClient, scoped: AsyncMock
) -> None:
    """The view in the fixture only grants customers:view."""
    response = await client.post(
        "/api/v1/customers",
        headers={"X-Tenant-ID": "org-a"},
        json={"first_name": "Grace", "last_name": "Achieng"},
    )
    assert response.status_code == 403
    scoped.create_customer.assert_not_awaited()


async def test_permission_denial_logged_as_warning(
    client: AsyncClient, scoped: AsyncMock, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="app.core.exception_handlers"):
        response = await client.post(
            "/api/v1/customers",
            headers={"X-Tenant-ID": "org-a"},
            json={"first_name": "Grace", "last_name": "Achieng"},
        )
    assert response.status_code == 403
    denials = [r for r in caplog.records if r.getMessage().startswith("Authorization denied")]
    assert denials and all(r.levelno == logging.WARNING for r in denials)


@pytest.fixture
def organizations() -> AsyncMock:
    service = AsyncMock()
    service.list_accessible.return_value = [
        AccessibleOrganization(ORG_A, "manager"),
        AccessibleOrganization(ORG_B, None),
    ]
    service.switch.return_value = TenantSwitchResult("org-a", "manager")
    service.create_organization.return_value = OrganizationResult(
        "org-new", "gamma", "Gamma", OrganizationStatus.ACTIVE
    )
    app.dependency_overrides[get_current_identity] = lambda: MEMBER_OF_A
    app.dependency_overrides[get_organization_service_for_read] = lambda: service
    app.dependency_overrides[get_organization_service] = lambda: service
    return service


async def test_list_accessible_organizations(
    client: AsyncClient, organizations: AsyncMock
) -> None:
    """No tenant header needed: this is how a client discovers its tenants."""
    response = await client.get("/api/v1/organizations")
    assert response.status_code == 200
    assert response.json() == [
        {"id": "org-a", "code": "alpha", "name": "Alpha", "status": "active", "role_name": "manager"},
        {"id": "org-b", "code": "beta", "name": "Beta", "status": "active", "role_name": None},
    ]


async def test_suspended_organization_not_listed_for_member(client: AsyncClient) -> None:
    """The listing is what the client picks its tenant from; it never offers a refused one."""
    suspended = OrganizationResult(
        "org-s", "alpha-s", "Alpha Suspended", OrganizationStatus.SUSPENDED
    )
    org_repo = AsyncMock()
    org_repo.list_for_user.return_value = [suspended, ORG_B]
    assignment_repo = AsyncMock()
    assignment_repo.get_active_role_names_for_user.return_value = {}
    service = OrganizationService(
        organization_repo=org_repo,
        membership_repo=AsyncMock(),
        branch_repo=AsyncMock(),
        user_repo=AsyncMock(),
        role_repo=AsyncMock(),
        assignment_repo=assignment_repo,
        tenant_access=AsyncMock(),
    )
    app.dependency_overrides[get_current_identity] = lambda: Identity(
        user_id="user-1", organization_ids=frozenset({"org-s", "org-b"})
    )
    app.dependency_overrides[get_organization_service_for_read] = lambda: service

    response = await client.get("/api/v1/organizations")
    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == ["org-b"]


async def test_switch_organization(client: AsyncClient, organizations: AsyncMock) -> None:
    response = await client.post("/api/v1/organizations/org-a/switch")
    assert response.status_code == 200
    assert response.json() == {"organization_id": "org-a", "role_name": "manager"}
    organizations.switch.assert_awaited_once_with(MEMBER_OF_A, "org-a")


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (CrossTenantAccessException("organization", "org-b", None), 403),
        (ResourceNotFoundException("organization", "org-x"), 404),
    ],
)
async def test_switch_rejected(
    client: AsyncClient, organizations: AsyncMock, error: Exception, status: int
) -> None:
    organizations.switch.side_effect = error
    response = await client.post("/api/v1/organizations/org-b/switch")
    assert response.status_code == status


async def test_create_organization(client: AsyncClient, organizations: AsyncMock) -> None:
    response = await client.post(
        "/api/v1/organizations", json={"code": "gamma", "name": "Gamma"}
    )
    assert response.status_code == 201
    assert response.json()["id"] == "org-new"
    organizations.create_organization.assert_awaited_once_with(MEMBER_OF_A, "gamma", "Gamma")


@pytest.fixture
def loans() -> AsyncMock:
    service = AsyncMock()
    service.create_loan.return_value = LoanResult(
        id="loan-1",
        tenant_id="org-a",
        customer_id="cust-1",
        principal=Decimal("1500.00"),
        interest_rate=Decimal("0.120"),
        term_months=6,
        status=LoanStatus.PENDING,
    )
    app.dependency_overrides[get_loan_service] = lambda: service
    app.dependency_overrides[get_loan_service_for_read] = lambda: service
    return service


async def test_create_loan_in_request_tenant(
    client: AsyncClient, as_member, loans: AsyncMock
) -> None:
    as_member(permissions=[PermissionName.LOANS_CREATE])
    response = await client.post(
        "/api/v1/loans",
        json={
            "customer_id": "cust-1",
            "principal": "1500.00",
            "interest_rate": "0.120",
            "term_months": 6,
        },
    )
    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    ctx, customer_id = loans.create_loan.await_args.args[:2]
    assert (ctx.tenant_id, customer_id) == ("org-a", "cust-1")


async def test_foreign_loan_id_is_403(
    client: AsyncClient, as_member, loans: AsyncMock
) -> None:
    as_member(permissions=[PermissionName.LOANS_VIEW])
    loans.get_loan.side_effect = CrossTenantAccessException("loan", "loan-b", "org-a")
    response = await client.get("/api/v1/loans/loan-b")
    assert response.status_code == 403
    assert "loan-b" not in response.text
