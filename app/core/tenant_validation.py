"""Format check for tenant and branch identifiers.

Shared by the tenant header middleware, the tenant context dependency and
the RLS session binding so a malformed id is rejected the same way
everywhere.
"""

import re

SCOPE_ID_MAX_LENGTH = 64
_SCOPE_ID_RE = re.compile(r"[a-zA-Z0-9_-]{1,%d}" % SCOPE_ID_MAX_LENGTH)


def is_valid_scope_id_format(value: str | None) -> bool:
    """True for cuid2/uuid-style ids: letters, digits, hyphen, underscore."""
    return bool(value) and _SCOPE_ID_RE.fullmatch(value) is not None


is_valid_tenant_id_format = is_valid_scope_id_format
