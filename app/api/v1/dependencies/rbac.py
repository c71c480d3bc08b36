"""Authorization dependencies: permissions view and route guards."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.authorization_service import AuthorizationService
from app.core.config import get_settings
from app.domain.authorization import (
    UserPermissionsView,
    has_any_role,
    has_minimum_role,
    has_permission,
)
from app.domain.exceptions import AuthorizationDenied
from app.domain.permissions import PermissionName, validate_permission_name
from app.infrastructure.persistence.database import get_db
from app.infrastructure.services import PermissionResolver

from .tenant import TenantCtx

Guard = Callable[..., Awaitable[UserPermissionsView]]


async def get_authorization_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizationService:
    """Build AuthorizationService with permission resolver and optional cache.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled;
    otherwise cache is None and every view is projected from the DB.
    """
    return AuthorizationService(
        permission_resolver=PermissionResolver(db),
        cache=getattr(request.app.state, "cache", None),
        cache_ttl=get_settings().cache_ttl_permissions,
    )


async def get_permissions_view(
    ctx: TenantCtx,
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> UserPermissionsView:
    """The caller's permissions view in the request tenant."""
    return await authorization.get_permissions_view(ctx.user_id, ctx.tenant_id)


PermissionsView = Annotated[UserPermissionsView, Depends(get_permissions_view)]


def require_permission(permission: PermissionName) -> Guard:
    """Dependency factory: require the caller to hold permission in the request tenant."""
    permission = validate_permission_name(permission)

    async def _require(view: PermissionsView) -> UserPermissionsView:
        if not has_permission(view, permission):
            raise AuthorizationDenied(reason=f"missing {permission.value}")
        return view

    return _require


def require_minimum_role(required_level: int) -> Guard:
    """Dependency factory: require a role at required_level or above (lower number)."""

    async def _require(view: PermissionsView) -> UserPermissionsView:
        if not has_minimum_role(view, required_level):
            raise AuthorizationDenied(reason=f"role level above {required_level}")
        return view

    return _require


def require_any_role(*role_names: str) -> Guard:
    """Dependency factory: require one of the named roles."""
    allowed = frozenset(role_names)

    async def _require(view: PermissionsView) -> UserPermissionsView:
        if not has_any_role(view, allowed):
            raise AuthorizationDenied(reason=f"role not in {sorted(allowed)}")
        return view

    return _require
