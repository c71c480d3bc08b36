"""Tests for the permission catalog (names, categories, validation) and its service."""

from unittest.mock import AsyncMock

import pytest

from app.application.dtos.permission import PermissionResult
from app.application.services.permission_catalog_service import (
    PermissionCatalogService,
)
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.domain.permissions import (
    PERMISSION_CATALOG,
    PermissionCategory,
    PermissionName,
    validate_catalog,
    validate_permission_name,
)


def _entry(pid: str, name: str) -> PermissionResult:
    permission = PermissionName(name)
    return PermissionResult(
        id=pid,
        name=name,
        category=permission.category.value,
        resource=permission.resource,
        action=permission.action,
        description=None,
    )


def test_catalog_covers_every_permission_once() -> None:
    """Seed catalog lists each PermissionName exactly once."""
    names = [entry.name for entry in PERMISSION_CATALOG]
    assert len(names) == len(set(names))
    assert set(names) == set(PermissionName)


def test_permission_names_are_resource_action() -> None:
    """Every name splits into resource and action and maps to a category."""
    for permission in PermissionName:
        resource, action = permission.value.split(":")
        assert permission.resource == resource
        assert permission.action == action
        assert isinstance(permission.category, PermissionCategory)


def test_branches_belong_to_organization_category() -> None:
    assert PermissionName.BRANCHES_MANAGE.category is PermissionCategory.ORGANIZATION


def test_validate_permission_name_accepts_member_and_string() -> None:
    assert validate_permission_name("loans:approve") is PermissionName.LOANS_APPROVE
    assert validate_permission_name(PermissionName.USERS_VIEW) is PermissionName.USERS_VIEW


def test_validate_catalog_rejects_unknown_entries() -> None:
    """Loading a catalog with unknown names fails as a whole, naming each offender."""
    with pytest.raises(ValidationException) as exc_info:
        validate_catalog(["users:view", "loans:teleport", "zz:top"])
    assert "loans:teleport" in exc_info.value.message
    assert "zz:top" in exc_info.value.message


async def test_list_permissions_groups_and_sorts() -> None:
    """Categories and names come back sorted."""
    repo = AsyncMock()
    repo.list_all.return_value = [
        _entry("p3", "users:view"),
        _entry("p1", "loans:view"),
        _entry("p2", "loans:approve"),
    ]
    grouped = await PermissionCatalogService(repo).list_permissions()
    assert list(grouped) == ["loans", "users"]
    assert [p.name for p in grouped["loans"]] == ["loans:approve", "loans:view"]


async def test_list_permissions_rejects_unknown_stored_name() -> None:
    """A stored row outside the known set makes the catalog load fail."""
    repo = AsyncMock()
    repo.list_all.return_value = [
        _entry("p1", "users:view"),
        PermissionResult("p9", "users:fly", "users", "users", "fly", None),
    ]
    with pytest.raises(ValidationException):
        await PermissionCatalogService(repo).list_permissions()


async def test_resolve_permission_ids_dedupes_in_order() -> None:
    repo = AsyncMock()
    repo.get_by_ids.return_value = [_entry("p2", "loans:view"), _entry("p1", "users:view")]
    resolved = await PermissionCatalogService(repo).resolve_permission_ids(
        ["p1", "p2", "p1"]
    )
    assert [p.id for p in resolved] == ["p1", "p2"]
    repo.get_by_ids.assert_awaited_once_with(["p1", "p2"])


async def test_resolve_permission_ids_unknown_id_not_found() -> None:
    repo = AsyncMock()
    repo.get_by_ids.return_value = [_entry("p1", "users:view")]
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await PermissionCatalogService(repo).resolve_permission_ids(["p1", "missing"])
    assert exc_info.value.details["resource_id"] == "missing"


async def test_get_permission() -> None:
    repo = AsyncMock()
    repo.get_permission.return_value = _entry("p1", "loans:view")
    permission = await PermissionCatalogService(repo).get_permission("p1")
    assert permission.name == "loans:view"


async def test_get_permission_unknown_id_not_found() -> None:
    repo = AsyncMock()
    repo.get_permission.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await PermissionCatalogService(repo).get_permission("missing")
