"""Role application service: organization roles and their permission sets."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from app.application.dtos.permission import PermissionResult
from app.application.dtos.role import RoleDetail, RoleResult, RoleSummary
from app.application.interfaces.repositories import (
    IRolePermissionRepository,
    IRoleRepository,
    IUserRoleAssignmentRepository,
)
from app.application.interfaces.services import ICacheService
from app.application.services.authorization_service import AuthorizationService
from app.application.services.permission_catalog_service import (
    PermissionCatalogService,
)
from app.core.cache_keys import role_key
from app.domain.authorization import UserPermissionsView
from app.domain.exceptions import (
    AuthorizationDenied,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

_MSG_SYSTEM_ROLE_READ_ONLY = "System roles are read-only templates"


def _detail_to_dict(detail: RoleDetail) -> dict[str, Any]:
    return {
        "role": vars(detail.role),
        "permissions": [vars(p) for p in detail.permissions],
    }


def _detail_from_dict(data: dict[str, Any]) -> RoleDetail:
    return RoleDetail(
        role=RoleResult(**data["role"]),
        permissions=[PermissionResult(**p) for p in data["permissions"]],
    )


def _require_outranks(acting_view: UserPermissionsView, hierarchy_level: int) -> None:
    """Non-super-admins may only create or edit roles strictly below their own level."""
    if acting_view.is_super_admin:
        return
    if acting_view.hierarchy_level is None or hierarchy_level <= acting_view.hierarchy_level:
        raise AuthorizationDenied(
            reason=f"role level {hierarchy_level} not below actor level {acting_view.hierarchy_level}"
        )


class RoleService:
    """Create, read, re-permission and delete roles of one tenant.

    System role templates (tenant_id NULL) are visible to every tenant and
    never modified here.
    """

    def __init__(
        self,
        role_repo: IRoleRepository,
        role_permission_repo: IRolePermissionRepository,
        assignment_repo: IUserRoleAssignmentRepository,
        catalog: PermissionCatalogService,
        authorization: AuthorizationService,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self._role_repo = role_repo
        self._role_permission_repo = role_permission_repo
        self._assignment_repo = assignment_repo
        self._catalog = catalog
        self._authorization = authorization
        self._cache = cache
        self._cache_ttl = cache_ttl

    def _cache_ready(self) -> bool:
        return self._cache is not None and self._cache.is_available()

    async def list_roles(self, tenant_id: str) -> list[RoleSummary]:
        """System templates and tenant roles, by hierarchy level then name."""
        return await self._role_repo.list_visible_with_user_count(tenant_id)

    async def get_role(self, role_id: str, tenant_id: str) -> RoleDetail:
        """Return role with its permissions. Uses cache if available.

        Raises:
            ResourceNotFoundException: Role is neither a template nor owned by tenant.
        """
        key = role_key(tenant_id, role_id)
        if self._cache_ready():
            cached = await self._cache.get(key)
            if cached is not None:
                return _detail_from_dict(cached)
        role = await self._role_repo.get_visible(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        permissions = await self._role_permission_repo.get_permissions_for_role(role_id)
        detail = RoleDetail(role=role, permissions=permissions)
        if self._cache_ready():
            await self._cache.set(key, _detail_to_dict(detail), ttl=self._cache_ttl)
        return detail

    @traced("role.create")
    async def create_role(
        self,
        tenant_id: str,
        acting_view: UserPermissionsView,
        name: str,
        hierarchy_level: int,
        description: str | None = None,
        permission_ids: Sequence[str] = (),
    ) -> RoleDetail:
        """Create an organization role with its initial permission set.

        Raises:
            ValidationException: Empty name, non-positive level, or name collision.
            AuthorizationDenied: Role would not be below the actor's own level.
            ResourceNotFoundException: A permission id is not in the catalog.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationException("Role name is required", field="name")
        if hierarchy_level < 1:
            raise ValidationException(
                "hierarchy_level must be a positive integer", field="hierarchy_level"
            )
        _require_outranks(acting_view, hierarchy_level)
        if await self._role_repo.find_visible_by_name(name, tenant_id) is not None:
            raise ValidationException(f"Role name '{name}' already exists", field="name")
        permissions = await self._catalog.resolve_permission_ids(permission_ids)
        role = await self._role_repo.create_role(
            tenant_id=tenant_id,
            name=name,
            description=description,
            hierarchy_level=hierarchy_level,
        )
        await self._role_permission_repo.replace_role_permissions(
            role.id, [p.id for p in permissions]
        )
        logger.info(
            "Role %s (%s, level %d) created in tenant %s by %s",
            role.id,
            name,
            hierarchy_level,
            tenant_id,
            acting_view.user_id,
        )
        return RoleDetail(role=role, permissions=permissions)

    async def _get_mutable_role(self, role_id: str, tenant_id: str) -> Any:
        role = await self._role_repo.get_entity_for_tenant(role_id, tenant_id)
        if role is not None:
            return role
        visible = await self._role_repo.get_visible(role_id, tenant_id)
        if visible is not None and visible.is_system_role:
            raise ValidationException(_MSG_SYSTEM_ROLE_READ_ONLY, field="role_id")
        raise ResourceNotFoundException("role", role_id)

    @traced("role.update_permissions")
    async def update_role_permissions(
        self,
        role_id: str,
        tenant_id: str,
        permission_ids: Sequence[str],
        acting_view: UserPermissionsView,
    ) -> RoleDetail:
        """Replace the full permission set of a tenant role in the caller's transaction.

        Invalidates the role detail, the views of users actively holding the
        role in this tenant, and the acting user's view.

        Raises:
            ResourceNotFoundException: Unknown role or permission id.
            ValidationException: Role is a system template.
            AuthorizationDenied: Role is not below the actor's own level.
        """
        role = await self._get_mutable_role(role_id, tenant_id)
        _require_outranks(acting_view, role.hierarchy_level)
        permissions = await self._catalog.resolve_permission_ids(permission_ids)
        await self._role_permission_repo.replace_role_permissions(
            role_id, [p.id for p in permissions]
        )
        holders = await self._assignment_repo.list_active_user_ids_for_role(
            role_id, tenant_id
        )
        await self._authorization.invalidate_role_cache(role_id, tenant_id)
        await self._authorization.invalidate_users_cache(
            [*holders, acting_view.user_id], tenant_id
        )
        logger.info(
            "Role %s permissions replaced (%d entries) in tenant %s by %s",
            role_id,
            len(permissions),
            tenant_id,
            acting_view.user_id,
        )
        return RoleDetail(
            role=RoleResult(
                id=role.id,
                tenant_id=role.tenant_id,
                name=role.name,
                description=role.description,
                hierarchy_level=role.hierarchy_level,
                is_system_role=role.is_system_role,
            ),
            permissions=permissions,
        )

    @traced("role.delete")
    async def delete_role(self, role_id: str, tenant_id: str) -> None:
        """Delete a tenant role that nobody actively holds.

        Raises:
            ResourceNotFoundException: Unknown role.
            ValidationException: Role is a system template.
            ConflictException: Role has active assignments (nothing is changed).
        """
        role = await self._get_mutable_role(role_id, tenant_id)
        active = await self._assignment_repo.count_active_for_role(role_id)
        if active > 0:
            raise ConflictException(
                "Role is assigned to active users and cannot be deleted",
                {"role_id": role_id, "active_assignments": active},
            )
        await self._role_repo.delete_role(role)
        await self._authorization.invalidate_role_cache(role_id, tenant_id)
        logger.info("Role %s deleted from tenant %s", role_id, tenant_id)
