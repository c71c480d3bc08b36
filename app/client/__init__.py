"""Client SDK: session-side tenant resolution, scoped query cache and permission gate."""

from app.client.api_client import MoneyflowClient, raise_for_api_error
from app.client.permissions_gate import PermissionsGate
from app.client.query_cache import TenantScopedQueryCache, fetch_tenant_scoped
from app.client.selection_store import (
    InMemoryTenantSelectionStore,
    JsonFileTenantSelectionStore,
    TenantSelectionStore,
)
from app.client.tenant_resolver import RetryPolicy, TenantContextResolver

__all__ = [
    "InMemoryTenantSelectionStore",
    "JsonFileTenantSelectionStore",
    "MoneyflowClient",
    "PermissionsGate",
    "RetryPolicy",
    "TenantContextResolver",
    "TenantScopedQueryCache",
    "TenantSelectionStore",
    "fetch_tenant_scoped",
    "raise_for_api_error",
]
