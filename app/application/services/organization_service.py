"""Organization service: accessible tenants, onboarding, switching and branches."""

from __future__ import annotations

import logging
import re

from app.application.dtos.organization import (
    AccessibleOrganization,
    BranchResult,
    OrganizationResult,
    TenantSwitchResult,
)
from app.application.dtos.user import Identity
from app.application.interfaces.repositories import (
    IBranchRepository,
    IMembershipRepository,
    IOrganizationRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleAssignmentRepository,
)
from app.application.services.tenant_access_service import TenantAccessService
from app.domain.enums import OrganizationStatus
from app.domain.exceptions import (
    OrganizationAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

ORGANIZATION_ADMIN_TEMPLATE = "admin"
DEFAULT_BRANCH_CODE = "MAIN"
DEFAULT_BRANCH_NAME = "Main branch"

_CODE_RE = re.compile(r"^[a-z0-9][a-z0-9-]{1,62}$")


class OrganizationService:
    """Organization lifecycle as seen by an authenticated identity."""

    def __init__(
        self,
        organization_repo: IOrganizationRepository,
        membership_repo: IMembershipRepository,
        branch_repo: IBranchRepository,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        assignment_repo: IUserRoleAssignmentRepository,
        tenant_access: TenantAccessService,
    ) -> None:
        self._organization_repo = organization_repo
        self._membership_repo = membership_repo
        self._branch_repo = branch_repo
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._assignment_repo = assignment_repo
        self._tenant_access = tenant_access

    async def list_accessible(self, identity: Identity) -> list[AccessibleOrganization]:
        """Organizations identity can act in, each with the identity's active role name.

        Super admins see every organization; members see only active ones.
        """
        if identity.is_super_admin:
            organizations = await self._organization_repo.list_all()
        else:
            organizations = [
                org
                for org in await self._organization_repo.list_for_user(identity.user_id)
                if org.status == OrganizationStatus.ACTIVE
            ]
        role_names = await self._assignment_repo.get_active_role_names_for_user(
            identity.user_id
        )
        return [
            AccessibleOrganization(organization=org, role_name=role_names.get(org.id))
            for org in organizations
        ]

    @traced("organization.create")
    async def create_organization(
        self, identity: Identity, code: str, name: str
    ) -> OrganizationResult:
        """Create an organization; the creator joins it with the admin template role.

        Also creates the default branch and makes the organization the
        creator's current one.

        Raises:
            ValidationException: Malformed code or empty name.
            OrganizationAlreadyExistsException: Code taken.
            ResourceNotFoundException: Admin role template not seeded.
        """
        code = (code or "").strip().lower()
        name = (name or "").strip()
        if not _CODE_RE.fullmatch(code):
            raise ValidationException(
                "Code must be 2-63 lowercase letters, digits or hyphens", field="code"
            )
        if not name:
            raise ValidationException("Organization name is required", field="name")
        if await self._organization_repo.get_by_code(code) is not None:
            raise OrganizationAlreadyExistsException(code)
        admin_role = await self._role_repo.get_system_role_by_name(
            ORGANIZATION_ADMIN_TEMPLATE
        )
        if admin_role is None:
            raise ResourceNotFoundException("role", ORGANIZATION_ADMIN_TEMPLATE)
        org = await self._organization_repo.create_organization(
            code=code, name=name, created_by=identity.user_id
        )
        await self._membership_repo.add_member(org.id, identity.user_id)
        await self._assignment_repo.create_assignment(
            user_id=identity.user_id,
            role_id=admin_role.id,
            tenant_id=org.id,
            assigned_by=identity.user_id,
        )
        await self._branch_repo.create_branch(
            org.id, DEFAULT_BRANCH_CODE, DEFAULT_BRANCH_NAME
        )
        await self._user_repo.set_current_organization(identity.user_id, org.id)
        logger.info("Organization %s (%s) created by %s", org.id, code, identity.user_id)
        return org

    async def get_organization(
        self, identity: Identity, organization_id: str
    ) -> OrganizationResult:
        return await self._tenant_access.ensure_access(identity, organization_id)

    @traced("organization.switch")
    async def switch(self, identity: Identity, organization_id: str) -> TenantSwitchResult:
        """Acknowledge a tenant switch and remember it as the identity's current organization."""
        await self._tenant_access.ensure_access(identity, organization_id)
        await self._user_repo.set_current_organization(identity.user_id, organization_id)
        role = await self._assignment_repo.get_active_role(
            identity.user_id, organization_id
        )
        logger.info("User %s switched to organization %s", identity.user_id, organization_id)
        return TenantSwitchResult(
            organization_id=organization_id,
            role_name=role.name if role else None,
        )

    async def list_branches(
        self, identity: Identity, organization_id: str
    ) -> list[BranchResult]:
        await self._tenant_access.ensure_access(identity, organization_id)
        return await self._branch_repo.list_branches(organization_id)
