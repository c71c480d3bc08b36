"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.authorization import RoleGrant


class IPermissionResolver(Protocol):
    """Protocol for loading the raw rows the permissions view is projected from."""

    async def get_role_grants(self, user_id: str, tenant_id: str) -> list[RoleGrant]:
        """Return one RoleGrant per active assignment of user in tenant."""

    async def is_super_admin(self, user_id: str) -> bool:
        """Return the user's super admin flag (False for unknown users)."""


class ICacheService(Protocol):
    """Minimal cache protocol for permission caching (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern. Returns count deleted."""


class IVerifiedToken(Protocol):
    """Subject of a verified bearer token and the provider that issued it."""

    subject: str
    provider: str


class ITokenVerifier(Protocol):
    """Protocol for bearer token verification (hosted provider or local JWT)."""

    async def verify(self, token: str) -> IVerifiedToken:
        """Return the verified token; raise ValueError when it is rejected."""
