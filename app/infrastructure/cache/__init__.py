"""Cache: Redis service and cache key builders."""

from app.core.cache_keys import (
    permission_key,
    permission_tenant_pattern,
    role_key,
    tenant_key,
)
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
    "permission_key",
    "permission_tenant_pattern",
    "role_key",
    "tenant_key",
]
