"""HTTP middleware: request ID, security headers, tenant context.

Applied in main app; order matters (last added = outermost).
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.middleware.tenant_context import TenantContextMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TenantContextMiddleware",
]
