"""DTOs for permission catalog use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionResult:
    """Catalog entry read-model."""

    id: str
    name: str
    category: str
    resource: str
    action: str
    description: str | None
