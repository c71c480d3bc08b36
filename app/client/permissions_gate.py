"""Client-side permission checks for the active tenant.

Wraps the pure authorization functions around the caller's view and the
tenant's members list. Until both are loaded every check answers False.
The server re-validates every mutation; the gate only decides what to offer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from app.domain.authorization import (
    UserPermissionsView,
    can_assign_role,
    can_manage_user,
    has_any_role,
    has_minimum_role,
    has_permission,
)
from app.domain.permissions import PermissionName

logger = logging.getLogger(__name__)


class PermissionsGate:
    def __init__(self, client: Any) -> None:
        self._client = client
        self.view: UserPermissionsView | None = None
        self._member_levels: dict[str, int | None] | None = None

    @property
    def loaded(self) -> bool:
        return self.view is not None and self._member_levels is not None

    def clear(self) -> None:
        self.view = None
        self._member_levels = None

    async def load(self) -> bool:
        """Load the view and members of the client's active tenant.

        Returns False, keeping the gate cleared, when the tenant changed
        while the requests were in flight.
        """
        tenant_id = self._client.tenant_id
        self.clear()
        view = await self._client.get_my_permissions()
        members = await self._client.list_users_with_roles()
        if self._client.tenant_id != tenant_id or view.tenant_id != tenant_id:
            logger.debug("Discarding permissions loaded for superseded tenant %s", tenant_id)
            return False
        self.view = view
        self._member_levels = {m["user_id"]: m.get("hierarchy_level") for m in members}
        return True

    def can(self, permission: PermissionName | str) -> bool:
        return has_permission(self.view, permission)

    def has_minimum_role(self, required_level: int) -> bool:
        return has_minimum_role(self.view, required_level)

    def has_any_role(self, role_names: Iterable[str]) -> bool:
        return has_any_role(self.view, role_names)

    def _target_level(self, user_id: str) -> int | None:
        if self._member_levels is None:
            return None
        return self._member_levels.get(user_id)

    def can_manage(self, user_id: str) -> bool:
        if self._member_levels is None:
            return False
        return can_manage_user(self.view, self._target_level(user_id))

    def can_assign(self, user_id: str, role_hierarchy_level: int) -> bool:
        if self._member_levels is None or user_id not in self._member_levels:
            return False
        return can_assign_role(self.view, role_hierarchy_level, self._target_level(user_id))
