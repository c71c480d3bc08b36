"""Tenant context middleware for RLS.

Copies a well-formed tenant header into the request's tenant contextvar so
database sessions bind ``app.current_tenant_id``. It authorizes nothing:
membership is verified by the tenant context dependency, which also rejects
missing or malformed headers with 400 on tenant-scoped routes.
"""

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from app.core.tenant_context import current_tenant_id
from app.core.tenant_validation import is_valid_tenant_id_format


class TenantContextMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = "X-Tenant-ID") -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        raw = Headers(scope=scope).get(self.header_name)
        tenant_id = raw if is_valid_tenant_id_format(raw) else None
        token = current_tenant_id.set(tenant_id)
        try:
            await self.app(scope, receive, send)
        finally:
            current_tenant_id.reset(token)
