"""Authorization service: resolves UserPermissionsView with caching (IPermissionResolver + cache)."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.application.interfaces.services import ICacheService, IPermissionResolver
from app.core.cache_keys import (
    permission_key,
    permission_tenant_pattern,
    role_key,
)
from app.domain.authorization import (
    UserPermissionsView,
    build_permissions_view,
    has_permission,
)
from app.domain.exceptions import AuthorizationDenied
from app.domain.permissions import PermissionName

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Projects and caches the per-tenant permissions view (5 min TTL typical).

    The view is derived on every cache miss from the assignment, role and
    permission rows; the cache only ever holds that projection.
    """

    def __init__(
        self,
        permission_resolver: IPermissionResolver,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self.permission_resolver = permission_resolver
        self.cache = cache
        self.cache_ttl = cache_ttl

    def _cache_ready(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def get_permissions_view(
        self, user_id: str, tenant_id: str
    ) -> UserPermissionsView:
        """Return the user's view in tenant. Uses cache if available."""
        key = permission_key(tenant_id, user_id)
        if self._cache_ready():
            cached = await self.cache.get(key)
            if cached is not None:
                return UserPermissionsView.from_dict(cached)

        grants = await self.permission_resolver.get_role_grants(user_id, tenant_id)
        is_super_admin = await self.permission_resolver.is_super_admin(user_id)
        if len(grants) > 1:
            logger.warning(
                "Ambiguous role state for user %s in tenant %s; denying role permissions",
                user_id,
                tenant_id,
            )
        view = build_permissions_view(user_id, tenant_id, is_super_admin, grants)
        if self._cache_ready():
            await self.cache.set(key, view.to_dict(), ttl=self.cache_ttl)
        return view

    async def require_permission(
        self, user_id: str, tenant_id: str, permission: PermissionName | str
    ) -> UserPermissionsView:
        """Return the view if it grants permission; raise AuthorizationDenied otherwise."""
        view = await self.get_permissions_view(user_id, tenant_id)
        if not has_permission(view, permission):
            raise AuthorizationDenied(reason=f"missing {permission}")
        return view

    async def invalidate_user_cache(self, user_id: str, tenant_id: str) -> None:
        """Invalidate cached view for one user."""
        if self._cache_ready():
            await self.cache.delete(permission_key(tenant_id, user_id))

    async def invalidate_users_cache(
        self, user_ids: Iterable[str], tenant_id: str
    ) -> None:
        """Invalidate cached views for several users of one tenant."""
        for user_id in dict.fromkeys(user_ids):
            await self.invalidate_user_cache(user_id, tenant_id)

    async def invalidate_tenant_cache(self, tenant_id: str) -> None:
        """Invalidate all cached views for a tenant."""
        if self._cache_ready():
            await self.cache.delete_pattern(permission_tenant_pattern(tenant_id))

    async def invalidate_role_cache(self, role_id: str, tenant_id: str) -> None:
        """Invalidate the cached role detail as seen by tenant."""
        if self._cache_ready():
            await self.cache.delete(role_key(tenant_id, role_id))
