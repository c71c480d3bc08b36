"""Cache key builders. Single place for key format.

Key components (tenant_id, user_id, role_id) must not contain CACHE_KEY_SEP
so one tenant's keys can never match another tenant's invalidation pattern.
"""

from app.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_PERMISSION,
    CACHE_PREFIX_ROLE,
    CACHE_PREFIX_TENANT,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value or "*" in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain {CACHE_KEY_SEP!r} or '*'"
        )


def _join(*parts: str) -> str:
    return CACHE_KEY_SEP.join(parts)


def permission_key(tenant_id: str, user_id: str) -> str:
    """Cache key for a user's permissions view in one tenant."""
    _validate_key_component(tenant_id, "tenant_id")
    _validate_key_component(user_id, "user_id")
    return _join(CACHE_PREFIX_PERMISSION, tenant_id, user_id)


def permission_tenant_pattern(tenant_id: str) -> str:
    """SCAN pattern matching every permissions view cached for tenant_id."""
    _validate_key_component(tenant_id, "tenant_id")
    return _join(CACHE_PREFIX_PERMISSION, tenant_id, "*")


def role_key(tenant_id: str, role_id: str) -> str:
    """Cache key for a role detail (role plus permission names) as seen by tenant_id."""
    _validate_key_component(tenant_id, "tenant_id")
    _validate_key_component(role_id, "role_id")
    return _join(CACHE_PREFIX_ROLE, tenant_id, role_id)


def tenant_key(tenant_id: str) -> str:
    """Cache key for an organization's existence and status."""
    _validate_key_component(tenant_id, "tenant_id")
    return _join(CACHE_PREFIX_TENANT, "id", tenant_id)

