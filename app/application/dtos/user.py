"""DTOs for user and identity use cases (no dependency on ORM)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserResult:
    """User read-model. No password."""

    id: str
    username: str
    email: str
    full_name: str | None
    is_super_admin: bool
    is_active: bool
    external_id: str | None = None
    current_organization_id: str | None = None


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as the authorization model sees it."""

    user_id: str
    is_super_admin: bool = False
    organization_ids: frozenset[str] = field(default_factory=frozenset)

    def is_member_of(self, organization_id: str) -> bool:
        return organization_id in self.organization_ids
