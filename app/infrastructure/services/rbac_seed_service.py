"""RBAC seeding: permission catalog rows and system role templates (idempotent)."""

from __future__ import annotations

import logging
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.permissions import PERMISSION_CATALOG, PermissionName
from app.infrastructure.persistence.models.permission import Permission, RolePermission
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)

logger = logging.getLogger(__name__)


class RoleTemplate(TypedDict):
    """System role template definition."""

    hierarchy_level: int
    description: str
    permissions: list[PermissionName]


def _all_with_action(action: str) -> list[PermissionName]:
    return [p for p in PermissionName if p.action == action]


def _all_for(*resources: str) -> list[PermissionName]:
    return [p for p in PermissionName if p.resource in resources]


SUPER_ADMIN_ROLE = "super_admin"
ADMIN_ROLE = "admin"

SYSTEM_ROLE_TEMPLATES: dict[str, RoleTemplate] = {
    SUPER_ADMIN_ROLE: {
        "hierarchy_level": 1,
        "description": "Platform operator with every permission",
        "permissions": list(PermissionName),
    },
    ADMIN_ROLE: {
        "hierarchy_level": 2,
        "description": "Organization administrator",
        "permissions": list(PermissionName),
    },
    "manager": {
        "hierarchy_level": 3,
        "description": "Branch or portfolio manager",
        "permissions": [
            PermissionName.USERS_VIEW,
            PermissionName.USERS_CREATE,
            PermissionName.USERS_EDIT,
            PermissionName.USERS_ASSIGN_ROLES,
            PermissionName.ROLES_VIEW,
            *_all_for("customers", "loans", "payments", "reports"),
            PermissionName.ORGANIZATION_VIEW,
            PermissionName.BRANCHES_VIEW,
        ],
    },
    "loan_officer": {
        "hierarchy_level": 4,
        "description": "Registers customers and originates loans",
        "permissions": [
            PermissionName.CUSTOMERS_VIEW,
            PermissionName.CUSTOMERS_CREATE,
            PermissionName.CUSTOMERS_EDIT,
            PermissionName.LOANS_VIEW,
            PermissionName.LOANS_CREATE,
            PermissionName.LOANS_EDIT,
            PermissionName.PAYMENTS_VIEW,
            PermissionName.PAYMENTS_CREATE,
            PermissionName.REPORTS_VIEW,
            PermissionName.ORGANIZATION_VIEW,
            PermissionName.BRANCHES_VIEW,
        ],
    },
    "viewer": {
        "hierarchy_level": 5,
        "description": "Read-only access",
        "permissions": _all_with_action("view"),
    },
}


class RbacSeedService:
    """Writes the permission catalog and system role templates. Safe to run repeatedly."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def seed(self) -> tuple[int, int]:
        """Insert missing catalog rows and system roles; return (permissions, roles) inserted."""
        inserted_permissions = await PermissionRepository(self.db).upsert_catalog(
            PERMISSION_CATALOG
        )
        permission_ids = await self._permission_ids_by_name()
        inserted_roles = 0
        for name, template in SYSTEM_ROLE_TEMPLATES.items():
            if await self._system_role_exists(name):
                continue
            role = Role(
                tenant_id=None,
                name=name,
                description=template["description"],
                hierarchy_level=template["hierarchy_level"],
                is_system_role=True,
            )
            self.db.add(role)
            await self.db.flush()
            self.db.add_all(
                RolePermission(role_id=role.id, permission_id=permission_ids[p.value])
                for p in dict.fromkeys(template["permissions"])
            )
            await self.db.flush()
            inserted_roles += 1
        logger.info(
            "RBAC seed complete: %d permissions, %d system roles inserted",
            inserted_permissions,
            inserted_roles,
        )
        return inserted_permissions, inserted_roles

    async def _permission_ids_by_name(self) -> dict[str, str]:
        result = await self.db.execute(select(Permission.name, Permission.id))
        return {name: pid for name, pid in result.all()}

    async def _system_role_exists(self, name: str) -> bool:
        result = await self.db.execute(
            select(Role.id).where(Role.tenant_id.is_(None), Role.name == name)
        )
        return result.first() is not None
