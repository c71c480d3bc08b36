"""Domain enumerations for the Moneyflow application.

Enums represent fixed sets of domain values (e.g. organization status).
"""

from enum import Enum


class OrganizationStatus(str, Enum):
    """Organization lifecycle status.

    Suspended organizations reject tenant-scoped API traffic.
    """

    ACTIVE = "active"
    SUSPENDED = "suspended"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class LoanStatus(str, Enum):
    """Loan lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    DISBURSED = "disbursed"
    CLOSED = "closed"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class TenantResolutionState(str, Enum):
    """States of the session-side tenant context resolver.

    UNINITIALIZED -> RESOLVING -> RESOLVED | UNRESOLVED. Every switch
    re-enters RESOLVING.
    """

    UNINITIALIZED = "uninitialized"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
