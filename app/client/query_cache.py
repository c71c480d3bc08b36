"""Client-side cache of tenant-scoped query results.

Entries are keyed by (tenant_id, query key). Reads only ever see the active
tenant's entries, and a response that arrives for a tenant that is no longer
active is dropped instead of stored.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, TypeVar

from app.domain.exceptions import TenantUnresolvedException

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISS = object()


class TenantScopedQueryCache:
    def __init__(self) -> None:
        self._active_tenant_id: str | None = None
        self._entries: dict[tuple[str, Hashable], Any] = {}

    @property
    def active_tenant_id(self) -> str | None:
        return self._active_tenant_id

    def activate(self, tenant_id: str | None) -> None:
        """Make tenant_id the tenant whose entries get and put operate on."""
        self._active_tenant_id = tenant_id

    def get(self, key: Hashable, default: Any = None) -> Any:
        if self._active_tenant_id is None:
            return default
        return self._entries.get((self._active_tenant_id, key), default)

    def put(self, tenant_id: str, key: Hashable, value: Any) -> bool:
        """Store value fetched for tenant_id. Returns False (and stores nothing) when stale."""
        if tenant_id != self._active_tenant_id:
            logger.debug(
                "Dropping stale response for %r: fetched for %s, active tenant %s",
                key,
                tenant_id,
                self._active_tenant_id,
            )
            return False
        self._entries[(tenant_id, key)] = value
        return True

    def invalidate(self, key: Hashable) -> None:
        if self._active_tenant_id is not None:
            self._entries.pop((self._active_tenant_id, key), None)

    def invalidate_tenant_scoped(self) -> None:
        """Drop every tenant-scoped entry, whichever tenant it belongs to."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


async def fetch_tenant_scoped(
    cache: TenantScopedQueryCache,
    key: Hashable,
    fetch: Callable[[], Awaitable[T]],
) -> T | None:
    """Return the cached value for key, or fetch and cache it.

    The tenant is captured before the fetch; when the active tenant changed
    while the fetch was in flight the result is discarded and None returned.

    Raises:
        TenantUnresolvedException: No tenant is active.
    """
    tenant_id = cache.active_tenant_id
    if tenant_id is None:
        raise TenantUnresolvedException()
    cached = cache.get(key, _MISS)
    if cached is not _MISS:
        return cached
    value = await fetch()
    if not cache.put(tenant_id, key, value):
        return None
    return value
