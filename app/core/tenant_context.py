"""Request tenant id for row-level security.

TenantContextMiddleware sets it from the tenant header; get_db and
get_db_transactional bind it to each session. Services never read it:
they receive RequestTenantContext explicitly.
"""

from contextvars import ContextVar

current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)


def get_tenant_id() -> str | None:
    return current_tenant_id.get()
