"""Permission catalog: the closed set of capabilities a role can grant.

Permission names are ``resource:action`` strings. Stored catalog rows and
permission checks are both validated against PermissionName so a typo is
rejected instead of silently denying (or granting) access.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from app.domain.exceptions import ValidationException


class PermissionCategory(str, Enum):
    """Display grouping for catalog entries."""

    USERS = "users"
    ROLES = "roles"
    CUSTOMERS = "customers"
    LOANS = "loans"
    PAYMENTS = "payments"
    REPORTS = "reports"
    ORGANIZATION = "organization"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid category values as strings."""
        return [category.value for category in cls]


class PermissionName(str, Enum):
    """Known permission identifiers (``resource:action``)."""

    USERS_VIEW = "users:view"
    USERS_CREATE = "users:create"
    USERS_EDIT = "users:edit"
    USERS_DELETE = "users:delete"
    USERS_ASSIGN_ROLES = "users:assign_roles"

    ROLES_VIEW = "roles:view"
    ROLES_CREATE = "roles:create"
    ROLES_EDIT = "roles:edit"
    ROLES_DELETE = "roles:delete"

    CUSTOMERS_VIEW = "customers:view"
    CUSTOMERS_CREATE = "customers:create"
    CUSTOMERS_EDIT = "customers:edit"
    CUSTOMERS_DELETE = "customers:delete"

    LOANS_VIEW = "loans:view"
    LOANS_CREATE = "loans:create"
    LOANS_EDIT = "loans:edit"
    LOANS_DELETE = "loans:delete"
    LOANS_APPROVE = "loans:approve"
    LOANS_DISBURSE = "loans:disburse"

    PAYMENTS_VIEW = "payments:view"
    PAYMENTS_CREATE = "payments:create"

    REPORTS_VIEW = "reports:view"
    REPORTS_EXPORT = "reports:export"

    ORGANIZATION_VIEW = "organization:view"
    ORGANIZATION_MANAGE = "organization:manage"
    BRANCHES_VIEW = "branches:view"
    BRANCHES_MANAGE = "branches:manage"

    @property
    def resource(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def action(self) -> str:
        return self.value.split(":", 1)[1]

    @property
    def category(self) -> PermissionCategory:
        return _RESOURCE_CATEGORY[self.resource]

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid permission names as strings."""
        return [name.value for name in cls]


_RESOURCE_CATEGORY: dict[str, PermissionCategory] = {
    "users": PermissionCategory.USERS,
    "roles": PermissionCategory.ROLES,
    "customers": PermissionCategory.CUSTOMERS,
    "loans": PermissionCategory.LOANS,
    "payments": PermissionCategory.PAYMENTS,
    "reports": PermissionCategory.REPORTS,
    "organization": PermissionCategory.ORGANIZATION,
    "branches": PermissionCategory.ORGANIZATION,
}


@dataclass(frozen=True)
class CatalogEntry:
    """Seed definition of one catalog row."""

    name: PermissionName
    description: str

    @property
    def category(self) -> PermissionCategory:
        return self.name.category


PERMISSION_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(PermissionName.USERS_VIEW, "View staff users and their roles"),
    CatalogEntry(PermissionName.USERS_CREATE, "Invite or create staff users"),
    CatalogEntry(PermissionName.USERS_EDIT, "Edit staff user profiles"),
    CatalogEntry(PermissionName.USERS_DELETE, "Remove staff users"),
    CatalogEntry(PermissionName.USERS_ASSIGN_ROLES, "Assign and change user roles"),
    CatalogEntry(PermissionName.ROLES_VIEW, "View roles and the permission catalog"),
    CatalogEntry(PermissionName.ROLES_CREATE, "Create custom roles"),
    CatalogEntry(PermissionName.ROLES_EDIT, "Edit custom roles"),
    CatalogEntry(PermissionName.ROLES_DELETE, "Delete custom roles"),
    CatalogEntry(PermissionName.CUSTOMERS_VIEW, "View customer records"),
    CatalogEntry(PermissionName.CUSTOMERS_CREATE, "Register customers"),
    CatalogEntry(PermissionName.CUSTOMERS_EDIT, "Edit customer records"),
    CatalogEntry(PermissionName.CUSTOMERS_DELETE, "Delete customer records"),
    CatalogEntry(PermissionName.LOANS_VIEW, "View the loan book"),
    CatalogEntry(PermissionName.LOANS_CREATE, "Create loan applications"),
    CatalogEntry(PermissionName.LOANS_EDIT, "Edit loan applications"),
    CatalogEntry(PermissionName.LOANS_DELETE, "Delete loan applications"),
    CatalogEntry(PermissionName.LOANS_APPROVE, "Approve or reject loans"),
    CatalogEntry(PermissionName.LOANS_DISBURSE, "Disburse approved loans"),
    CatalogEntry(PermissionName.PAYMENTS_VIEW, "View repayments"),
    CatalogEntry(PermissionName.PAYMENTS_CREATE, "Record repayments"),
    CatalogEntry(PermissionName.REPORTS_VIEW, "View dashboards and reports"),
    CatalogEntry(PermissionName.REPORTS_EXPORT, "Export reports"),
    CatalogEntry(PermissionName.ORGANIZATION_VIEW, "View organization settings"),
    CatalogEntry(PermissionName.ORGANIZATION_MANAGE, "Manage organization settings"),
    CatalogEntry(PermissionName.BRANCHES_VIEW, "View branches"),
    CatalogEntry(PermissionName.BRANCHES_MANAGE, "Create and edit branches"),
)


def validate_permission_name(value: str | PermissionName) -> PermissionName:
    """Return the catalog member for value.

    Raises:
        ValidationException: If value is not a known permission name.
    """
    if isinstance(value, PermissionName):
        return value
    try:
        return PermissionName(value)
    except ValueError:
        raise ValidationException(
            f"Unknown permission: {value!r}", field="permission"
        ) from None


def validate_catalog(names: Iterable[str]) -> list[PermissionName]:
    """Validate stored catalog names; reject the whole load if any is unknown.

    Raises:
        ValidationException: Listing every unknown name.
    """
    parsed: list[PermissionName] = []
    unknown: list[str] = []
    for name in names:
        try:
            parsed.append(PermissionName(name))
        except ValueError:
            unknown.append(name)
    if unknown:
        raise ValidationException(
            f"Permission catalog contains unknown entries: {', '.join(sorted(unknown))}",
            field="permission",
        )
    return parsed
