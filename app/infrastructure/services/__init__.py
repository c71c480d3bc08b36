"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.permission_resolver import PermissionResolver
from app.infrastructure.services.rbac_seed_service import (
    SYSTEM_ROLE_TEMPLATES,
    RbacSeedService,
)

__all__ = [
    "PermissionResolver",
    "RbacSeedService",
    "SYSTEM_ROLE_TEMPLATES",
]
