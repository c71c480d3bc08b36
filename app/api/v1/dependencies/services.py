"""Application service dependencies (composition root).

Routes depend on these; services are built from infrastructure repositories here.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services import (
    AuthorizationService,
    CustomerService,
    LoanService,
    OrganizationService,
    PermissionCatalogService,
    RoleService,
    TenantAccessService,
    UserRoleService,
)
from app.core.config import get_settings
from app.infrastructure.persistence.repositories import (
    BranchRepository,
    CustomerRepository,
    LoanRepository,
    MembershipRepository,
    OrganizationRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleAssignmentRepository,
)

from . import db as repos
from .db import ReadSession, WriteSession
from .rbac import get_authorization_service
from .tenant import get_tenant_access_service

Authorization = Annotated[AuthorizationService, Depends(get_authorization_service)]


async def get_permission_catalog_service(
    permission_repo: Annotated[PermissionRepository, Depends(repos.get_permission_repo)],
) -> PermissionCatalogService:
    return PermissionCatalogService(permission_repo)


def _build_role_service(
    request: Request,
    role_repo: RoleRepository,
    role_permission_repo: RolePermissionRepository,
    assignment_repo: UserRoleAssignmentRepository,
    permission_repo: PermissionRepository,
    authorization: AuthorizationService,
) -> RoleService:
    return RoleService(
        role_repo=role_repo,
        role_permission_repo=role_permission_repo,
        assignment_repo=assignment_repo,
        catalog=PermissionCatalogService(permission_repo),
        authorization=authorization,
        cache=getattr(request.app.state, "cache", None),
        cache_ttl=get_settings().cache_ttl_permissions,
    )


async def get_role_service_for_read(
    request: Request,
    db: ReadSession,
    authorization: Authorization,
) -> RoleService:
    """Role service for list/get."""
    return _build_role_service(
        request,
        RoleRepository(db),
        RolePermissionRepository(db),
        UserRoleAssignmentRepository(db),
        PermissionRepository(db),
        authorization,
    )


async def get_role_service(
    request: Request,
    db: WriteSession,
    authorization: Authorization,
) -> RoleService:
    """Role service for create/update/delete (one transaction per request)."""
    return _build_role_service(
        request,
        RoleRepository(db),
        RolePermissionRepository(db),
        UserRoleAssignmentRepository(db),
        PermissionRepository(db),
        authorization,
    )


async def get_user_role_service_for_read(
    db: ReadSession,
    authorization: Authorization,
) -> UserRoleService:
    return UserRoleService(
        assignment_repo=UserRoleAssignmentRepository(db),
        role_repo=RoleRepository(db),
        membership_repo=MembershipRepository(db),
        authorization=authorization,
    )


async def get_user_role_service(
    db: WriteSession,
    authorization: Authorization,
) -> UserRoleService:
    """User role service for assign/remove (transactional, row locks)."""
    return UserRoleService(
        assignment_repo=UserRoleAssignmentRepository(db),
        role_repo=RoleRepository(db),
        membership_repo=MembershipRepository(db),
        authorization=authorization,
    )


def _build_organization_service(
    db: AsyncSession, tenant_access: TenantAccessService
) -> OrganizationService:
    return OrganizationService(
        organization_repo=OrganizationRepository(db),
        membership_repo=MembershipRepository(db),
        branch_repo=BranchRepository(db),
        user_repo=UserRepository(db),
        role_repo=RoleRepository(db),
        assignment_repo=UserRoleAssignmentRepository(db),
        tenant_access=tenant_access,
    )


async def get_organization_service_for_read(
    db: ReadSession,
    tenant_access: Annotated[TenantAccessService, Depends(get_tenant_access_service)],
) -> OrganizationService:
    return _build_organization_service(db, tenant_access)


async def get_organization_service(
    db: WriteSession,
    tenant_access: Annotated[TenantAccessService, Depends(get_tenant_access_service)],
) -> OrganizationService:
    """Organization service for create/switch (transactional)."""
    return _build_organization_service(db, tenant_access)


async def get_customer_service_for_read(
    customer_repo: Annotated[CustomerRepository, Depends(repos.get_customer_repo)],
    branch_repo: Annotated[BranchRepository, Depends(repos.get_branch_repo)],
) -> CustomerService:
    return CustomerService(customer_repo, branch_repo)


async def get_customer_service(db: WriteSession) -> CustomerService:
    return CustomerService(CustomerRepository(db), BranchRepository(db))


async def get_loan_service_for_read(
    loan_repo: Annotated[LoanRepository, Depends(repos.get_loan_repo)],
    customer_repo: Annotated[CustomerRepository, Depends(repos.get_customer_repo)],
) -> LoanService:
    return LoanService(loan_repo, customer_repo)


async def get_loan_service(db: WriteSession) -> LoanService:
    return LoanService(LoanRepository(db), CustomerRepository(db))
