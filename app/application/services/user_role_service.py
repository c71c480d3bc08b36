"""User role assignment service: grant, revoke and list organization roles."""

from __future__ import annotations

import logging

from app.application.dtos.role import AssignmentResult, MemberRoleResult
from app.application.interfaces.repositories import (
    IMembershipRepository,
    IRoleRepository,
    IUserRoleAssignmentRepository,
)
from app.application.services.authorization_service import AuthorizationService
from app.domain.authorization import (
    UserPermissionsView,
    can_assign_role,
    can_manage_user,
)
from app.domain.exceptions import AuthorizationDenied, ResourceNotFoundException
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class UserRoleService:
    """Keeps exactly one active role per (user, tenant).

    Every write locks the target's active rows first, so two concurrent
    reassignments of the same user serialize; the partial unique index on
    active rows is the backstop and surfaces as ConflictException.
    """

    def __init__(
        self,
        assignment_repo: IUserRoleAssignmentRepository,
        role_repo: IRoleRepository,
        membership_repo: IMembershipRepository,
        authorization: AuthorizationService,
    ) -> None:
        self._assignment_repo = assignment_repo
        self._role_repo = role_repo
        self._membership_repo = membership_repo
        self._authorization = authorization

    async def list_users_with_roles(self, tenant_id: str) -> list[MemberRoleResult]:
        return await self._assignment_repo.list_members_with_roles(tenant_id)

    async def _locked_target_level(self, user_id: str, tenant_id: str) -> int | None:
        """Lock the target's active rows and return its highest authority (lowest level)."""
        rows = await self._assignment_repo.lock_active_assignments(user_id, tenant_id)
        if len(rows) > 1:
            logger.warning(
                "User %s has %d active role assignments in tenant %s",
                user_id,
                len(rows),
                tenant_id,
            )
        levels: list[int] = []
        for row in rows:
            role = await self._role_repo.get_visible(row.role_id, tenant_id)
            if role is not None:
                levels.append(role.hierarchy_level)
        return min(levels) if levels else None

    @traced("user_role.assign")
    async def assign_role(
        self,
        tenant_id: str,
        target_user_id: str,
        role_id: str,
        acting_view: UserPermissionsView,
    ) -> AssignmentResult:
        """Make role_id the target's only active role in tenant.

        Raises:
            ResourceNotFoundException: Target is not a member, or role not visible.
            AuthorizationDenied: Actor may not grant this role to this target.
            ConflictException: A concurrent assignment won the race.
        """
        if not await self._membership_repo.is_active_member(tenant_id, target_user_id):
            raise ResourceNotFoundException("user", target_user_id)
        role = await self._role_repo.get_visible(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        target_level = await self._locked_target_level(target_user_id, tenant_id)
        if not can_assign_role(acting_view, role.hierarchy_level, target_level):
            logger.info(
                "Role assignment denied: actor %s, target %s, role %s, tenant %s",
                acting_view.user_id,
                target_user_id,
                role_id,
                tenant_id,
            )
            raise AuthorizationDenied(reason="role assignment outside actor authority")
        await self._assignment_repo.deactivate_active(target_user_id, tenant_id)
        assignment = await self._assignment_repo.create_assignment(
            user_id=target_user_id,
            role_id=role_id,
            tenant_id=tenant_id,
            assigned_by=acting_view.user_id,
        )
        await self._authorization.invalidate_user_cache(target_user_id, tenant_id)
        logger.info(
            "Role %s assigned to user %s in tenant %s by %s",
            role_id,
            target_user_id,
            tenant_id,
            acting_view.user_id,
        )
        return assignment

    @traced("user_role.remove")
    async def remove_role(
        self,
        tenant_id: str,
        target_user_id: str,
        acting_view: UserPermissionsView,
    ) -> None:
        """Deactivate the target's active role in tenant.

        Raises:
            ResourceNotFoundException: Target has no active role.
            AuthorizationDenied: Actor may not manage the target.
        """
        target_level = await self._locked_target_level(target_user_id, tenant_id)
        if target_level is None:
            raise ResourceNotFoundException("role assignment", target_user_id)
        if not can_manage_user(acting_view, target_level):
            raise AuthorizationDenied(reason="target outside actor authority")
        await self._assignment_repo.deactivate_active(target_user_id, tenant_id)
        await self._authorization.invalidate_user_cache(target_user_id, tenant_id)
        logger.info(
            "Role removed from user %s in tenant %s by %s",
            target_user_id,
            tenant_id,
            acting_view.user_id,
        )
