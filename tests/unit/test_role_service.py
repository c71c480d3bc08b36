"""Unit tests for RoleService (create, re-permission, delete, system role templates)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos.permission import PermissionResult
from app.application.dtos.role import RoleResult
from app.application.services.role_service import RoleService
from app.core.cache_keys import role_key
from app.domain.exceptions import (
    AuthorizationDenied,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.permissions import PermissionName

TENANT = "org-a"

LOANS_VIEW = PermissionResult("p-loans-view", "loans:view", "loans", "loans", "view", None)


def _role(role_id: str = "role-custom", level: int = 4, system: bool = False) -> RoleResult:
    return RoleResult(
        id=role_id,
        tenant_id=None if system else TENANT,
        name="field_agent" if not system else "viewer",
        description=None,
        hierarchy_level=level,
        is_system_role=system,
    )


def _entity(role_id: str = "role-custom", level: int = 4) -> SimpleNamespace:
    return SimpleNamespace(
        id=role_id,
        tenant_id=TENANT,
        name="field_agent",
        description=None,
        hierarchy_level=level,
        is_system_role=False,
    )


@pytest.fixture
def deps() -> SimpleNamespace:
    role_repo = AsyncMock()
    role_repo.find_visible_by_name.return_value = None
    role_repo.create_role.return_value = _role()
    role_repo.get_entity_for_tenant.return_value = _entity()
    role_permission_repo = AsyncMock()
    assignment_repo = AsyncMock()
    assignment_repo.count_active_for_role.return_value = 0
    assignment_repo.list_active_user_ids_for_role.return_value = ["user-holder"]
    catalog = AsyncMock()
    catalog.resolve_permission_ids.return_value = [LOANS_VIEW]
    authorization = AsyncMock()
    return SimpleNamespace(
        role_repo=role_repo,
        role_permission_repo=role_permission_repo,
        assignment_repo=assignment_repo,
        catalog=catalog,
        authorization=authorization,
    )


def _service(deps: SimpleNamespace, cache: MagicMock | None = None) -> RoleService:
    return RoleService(
        role_repo=deps.role_repo,
        role_permission_repo=deps.role_permission_repo,
        assignment_repo=deps.assignment_repo,
        catalog=deps.catalog,
        authorization=deps.authorization,
        cache=cache,
    )


async def test_create_role_with_permissions(deps: SimpleNamespace, view_factory) -> None:
    """Role is created below the actor and its permission set written."""
    actor = view_factory([PermissionName.ROLES_CREATE], hierarchy_level=2)
    detail = await _service(deps).create_role(
        TENANT, actor, name="  field_agent ", hierarchy_level=4, permission_ids=["p-loans-view"]
    )
    assert detail.role.id == "role-custom"
    assert detail.permissions == [LOANS_VIEW]
    deps.role_repo.create_role.assert_awaited_once_with(
        tenant_id=TENANT, name="field_agent", description=None, hierarchy_level=4
    )
    deps.role_permission_repo.replace_role_permissions.assert_awaited_once_with(
        "role-custom", ["p-loans-view"]
    )


@pytest.mark.parametrize("level", [1, 2])
async def test_create_role_at_or_above_actor_level_denied(
    deps: SimpleNamespace, view_factory, level: int
) -> None:
    actor = view_factory([PermissionName.ROLES_CREATE], hierarchy_level=2)
    with pytest.raises(AuthorizationDenied):
        await _service(deps).create_role(TENANT, actor, name="boss", hierarchy_level=level)
    deps.role_repo.create_role.assert_not_awaited()


async def test_super_admin_creates_any_level(deps: SimpleNamespace, view_factory) -> None:
    actor = view_factory(hierarchy_level=None, is_super_admin=True)
    await _service(deps).create_role(TENANT, actor, name="owner", hierarchy_level=1)
    deps.role_repo.create_role.assert_awaited_once()


async def test_create_role_name_collision(deps: SimpleNamespace, view_factory) -> None:
    """A name already visible to the tenant (template or own role) is rejected."""
    deps.role_repo.find_visible_by_name.return_value = _role(system=True)
    actor = view_factory(hierarchy_level=1)
    with pytest.raises(ValidationException) as exc_info:
        await _service(deps).create_role(TENANT, actor, name="Viewer", hierarchy_level=5)
    assert exc_info.value.details == {"field": "name"}


@pytest.mark.parametrize(("name", "level"), [("", 4), ("   ", 4), ("ok", 0), ("ok", -2)])
async def test_create_role_invalid_input(
    deps: SimpleNamespace, view_factory, name: str, level: int
) -> None:
    actor = view_factory(hierarchy_level=1)
    with pytest.raises(ValidationException):
        await _service(deps).create_role(TENANT, actor, name=name, hierarchy_level=level)


async def test_update_permissions_invalidates_role_and_holders(
    deps: SimpleNamespace, view_factory
) -> None:
    """Re-permissioning invalidates the role, its active holders and the actor."""
    actor = view_factory([PermissionName.USERS_ASSIGN_ROLES], hierarchy_level=2)
    detail = await _service(deps).update_role_permissions(
        "role-custom", TENANT, ["p-loans-view"], actor
    )
    assert detail.permissions == [LOANS_VIEW]
    deps.role_permission_repo.replace_role_permissions.assert_awaited_once_with(
        "role-custom", ["p-loans-view"]
    )
    deps.authorization.invalidate_role_cache.assert_awaited_once_with("role-custom", TENANT)
    deps.authorization.invalidate_users_cache.assert_awaited_once_with(
        ["user-holder", actor.user_id], TENANT
    )


async def test_update_permissions_of_system_role_rejected(
    deps: SimpleNamespace, view_factory
) -> None:
    """System templates are read-only."""
    deps.role_repo.get_entity_for_tenant.return_value = None
    deps.role_repo.get_visible.return_value = _role("role-viewer", 5, system=True)
    actor = view_factory(hierarchy_level=None, is_super_admin=True)
    with pytest.raises(ValidationException):
        await _service(deps).update_role_permissions("role-viewer", TENANT, [], actor)
    deps.role_permission_repo.replace_role_permissions.assert_not_awaited()


async def test_update_permissions_role_of_other_tenant_not_found(
    deps: SimpleNamespace, view_factory
) -> None:
    deps.role_repo.get_entity_for_tenant.return_value = None
    deps.role_repo.get_visible.return_value = None
    actor = view_factory(hierarchy_level=1)
    with pytest.raises(ResourceNotFoundException):
        await _service(deps).update_role_permissions("role-foreign", TENANT, [], actor)


async def test_update_permissions_of_peer_role_denied(
    deps: SimpleNamespace, view_factory
) -> None:
    deps.role_repo.get_entity_for_tenant.return_value = _entity(level=3)
    actor = view_factory([PermissionName.USERS_ASSIGN_ROLES], hierarchy_level=3)
    with pytest.raises(AuthorizationDenied):
        await _service(deps).update_role_permissions("role-custom", TENANT, [], actor)


async def test_delete_role_with_active_holders_conflicts(deps: SimpleNamespace) -> None:
    """Deleting a role someone holds is a conflict and changes nothing."""
    deps.assignment_repo.count_active_for_role.return_value = 2
    with pytest.raises(ConflictException) as exc_info:
        await _service(deps).delete_role("role-custom", TENANT)
    assert exc_info.value.error_code == "CONFLICT"
    assert exc_info.value.details["active_assignments"] == 2
    deps.role_repo.delete_role.assert_not_awaited()


async def test_delete_unused_role(deps: SimpleNamespace) -> None:
    await _service(deps).delete_role("role-custom", TENANT)
    deps.role_repo.delete_role.assert_awaited_once()
    deps.authorization.invalidate_role_cache.assert_awaited_once_with("role-custom", TENANT)


async def test_get_role_uses_cache(deps: SimpleNamespace, mock_cache: MagicMock) -> None:
    deps.role_repo.get_visible.return_value = _role()
    deps.role_permission_repo.get_permissions_for_role.return_value = [LOANS_VIEW]
    service = _service(deps, cache=mock_cache)

    first = await service.get_role("role-custom", TENANT)
    second = await service.get_role("role-custom", TENANT)

    assert first == second
    assert role_key(TENANT, "role-custom") in mock_cache.store
    deps.role_repo.get_visible.assert_awaited_once()


async def test_get_role_not_visible(deps: SimpleNamespace) -> None:
    deps.role_repo.get_visible.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await _service(deps).get_role("role-x", TENANT)
