"""Authorization model: the per-tenant permissions view and pure decision functions.

Every check takes the acting user's UserPermissionsView (or None when it has
not been loaded) and answers without I/O. Missing data always denies.
Lower hierarchy_level means more authority: level 1 outranks level 3.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from app.domain.permissions import PermissionName, validate_permission_name


@dataclass(frozen=True)
class RoleGrant:
    """One active assignment row joined with its role and permission names."""

    role_id: str
    role_name: str
    hierarchy_level: int
    permissions: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class UserPermissionsView:
    """Derived authorization state of one user in one tenant. Never persisted."""

    user_id: str
    tenant_id: str
    role_id: str | None
    role_name: str | None
    hierarchy_level: int | None
    permissions: frozenset[str]
    is_super_admin: bool = False

    @property
    def has_role(self) -> bool:
        return self.role_id is not None and self.hierarchy_level is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form (used for the permission cache and API responses)."""
        return {
            "user_id": self.user_id,
            "tenant_id": self.tenant_id,
            "role_id": self.role_id,
            "role_name": self.role_name,
            "hierarchy_level": self.hierarchy_level,
            "permissions": sorted(self.permissions),
            "is_super_admin": self.is_super_admin,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserPermissionsView:
        return cls(
            user_id=data["user_id"],
            tenant_id=data["tenant_id"],
            role_id=data.get("role_id"),
            role_name=data.get("role_name"),
            hierarchy_level=data.get("hierarchy_level"),
            permissions=frozenset(data.get("permissions") or ()),
            is_super_admin=bool(data.get("is_super_admin", False)),
        )


def build_permissions_view(
    user_id: str,
    tenant_id: str,
    is_super_admin: bool,
    grants: Sequence[RoleGrant],
) -> UserPermissionsView:
    """Project active assignments into a UserPermissionsView.

    Exactly one grant yields that role and its known permissions. Zero grants
    yields a view with no role. More than one grant is an inconsistent state
    and yields a view with no role and no permissions (fail closed); the
    super admin flag is kept in every case since it is a property of the user.
    """
    if len(grants) != 1:
        return UserPermissionsView(
            user_id=user_id,
            tenant_id=tenant_id,
            role_id=None,
            role_name=None,
            hierarchy_level=None,
            permissions=frozenset(),
            is_super_admin=is_super_admin,
        )
    grant = grants[0]
    known = frozenset(PermissionName.values())
    return UserPermissionsView(
        user_id=user_id,
        tenant_id=tenant_id,
        role_id=grant.role_id,
        role_name=grant.role_name,
        hierarchy_level=grant.hierarchy_level,
        permissions=frozenset(p for p in grant.permissions if p in known),
        is_super_admin=is_super_admin,
    )


def has_permission(
    view: UserPermissionsView | None, permission: PermissionName | str
) -> bool:
    """True if the user is a super admin or the view grants permission.

    Raises:
        ValidationException: If permission is not in the catalog.
    """
    name = validate_permission_name(permission)
    if view is None:
        return False
    if view.is_super_admin:
        return True
    return name.value in view.permissions


def has_minimum_role(view: UserPermissionsView | None, required_level: int) -> bool:
    """True if the user is a super admin or holds a role at required_level or above."""
    if view is None:
        return False
    if view.is_super_admin:
        return True
    if view.hierarchy_level is None:
        return False
    return view.hierarchy_level <= required_level


def has_any_role(view: UserPermissionsView | None, role_names: Iterable[str]) -> bool:
    """True if the user is a super admin or their role name is one of role_names."""
    if view is None:
        return False
    if view.is_super_admin:
        return True
    if view.role_name is None:
        return False
    return view.role_name in set(role_names)


def can_manage_user(
    acting_view: UserPermissionsView | None, target_hierarchy_level: int | None
) -> bool:
    """Decide whether the acting user may manage a user at target_hierarchy_level.

    target_hierarchy_level is None when the target has no active role or has
    not been loaded; either way the target cannot be reasoned about.
    """
    if acting_view is None:
        return False
    if acting_view.is_super_admin:
        return True
    if not has_permission(acting_view, PermissionName.USERS_ASSIGN_ROLES):
        return False
    if target_hierarchy_level is None:
        return False
    if acting_view.hierarchy_level is None:
        return False
    if target_hierarchy_level <= acting_view.hierarchy_level:
        return False
    return True


def can_assign_role(
    acting_view: UserPermissionsView | None,
    role_hierarchy_level: int,
    target_hierarchy_level: int | None,
) -> bool:
    """Decide whether the acting user may give a role to a target user.

    The granted role must be strictly below the actor's authority. A target
    that already holds a role must also be manageable by the actor; a target
    with no role can receive one.
    """
    if acting_view is None:
        return False
    if acting_view.is_super_admin:
        return True
    if not has_permission(acting_view, PermissionName.USERS_ASSIGN_ROLES):
        return False
    if acting_view.hierarchy_level is None:
        return False
    if role_hierarchy_level <= acting_view.hierarchy_level:
        return False
    if target_hierarchy_level is not None and not can_manage_user(
        acting_view, target_hierarchy_level
    ):
        return False
    return True
