"""Session-side tenant context resolver.

States: UNINITIALIZED -> RESOLVING -> RESOLVED | UNRESOLVED; every switch
re-enters RESOLVING. Entering RESOLVING drops the tenant header, the cached
tenant-scoped reads and the loaded permissions synchronously, before the
first await, so no read can be attributed to the wrong tenant. Each
operation takes a generation number; a response that comes back after a
newer operation started is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

from app.client.api_client import MoneyflowClient
from app.client.permissions_gate import PermissionsGate
from app.client.query_cache import TenantScopedQueryCache
from app.client.selection_store import TenantSelectionStore
from app.core.config import Settings
from app.domain.enums import OrganizationStatus, TenantResolutionState
from app.domain.exceptions import AuthorizationDenied, ResourceNotFoundException
from app.domain.tenancy import TenantContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Capped exponential backoff for transport failures and 5xx responses."""

    attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 4.0

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            attempts=settings.client_retry_attempts,
            base_delay=settings.client_retry_base_delay_seconds,
            max_delay=settings.client_retry_max_delay_seconds,
        )

    def delay(self, retry_number: int) -> float:
        return min(self.max_delay, self.base_delay * (2**retry_number))


def is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class TenantContextResolver:
    """Owns the session's TenantContext; nothing else mutates it."""

    def __init__(
        self,
        client: MoneyflowClient,
        store: TenantSelectionStore,
        session_id: str,
        cache: TenantScopedQueryCache | None = None,
        gate: PermissionsGate | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._store = store
        self._session_id = session_id
        self.cache = cache or TenantScopedQueryCache()
        self._gate = gate
        self._retry = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._generation = 0
        self._state = TenantResolutionState.UNINITIALIZED
        self._context: TenantContext | None = None
        self._last_resolved: TenantContext | None = None
        self.organizations: list[dict[str, Any]] = []

    @property
    def state(self) -> TenantResolutionState:
        return self._state

    @property
    def context(self) -> TenantContext | None:
        return self._context

    def _begin(self) -> int:
        self._generation += 1
        self._state = TenantResolutionState.RESOLVING
        self._context = None
        self._client.set_tenant(None)
        self.cache.activate(None)
        self.cache.invalidate_tenant_scoped()
        if self._gate is not None:
            self._gate.clear()
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _apply(self, context: TenantContext) -> TenantContext:
        self._context = context
        self._last_resolved = context
        self._client.set_tenant(context.tenant_id, context.branch_id)
        self.cache.activate(context.tenant_id)
        self._state = TenantResolutionState.RESOLVED
        return context

    def _fail(self) -> None:
        self._context = None
        self._state = TenantResolutionState.UNRESOLVED

    async def _with_retry(self, call: Callable[[], Awaitable[T]]) -> T:
        for attempt in range(max(1, self._retry.attempts)):
            try:
                return await call()
            except (httpx.TransportError, httpx.HTTPStatusError) as e:
                if not is_retryable(e) or attempt + 1 >= self._retry.attempts:
                    raise
                delay = self._retry.delay(attempt)
                logger.warning(
                    "Tenant resolution request failed (%s), retry %d/%d in %.2fs",
                    type(e).__name__,
                    attempt + 1,
                    self._retry.attempts - 1,
                    delay,
                )
                await self._sleep(delay)
        raise AssertionError("unreachable")

    async def resolve(self) -> TenantContext | None:
        """Pick the session tenant: the stored selection if still accessible, else the first.

        Returns None (UNRESOLVED) when the identity has no organization or
        the API stayed unreachable; the caller then shows onboarding.
        Responses superseded by a newer resolve or switch are ignored and
        the current context is returned.
        """
        generation = self._begin()
        try:
            organizations = await self._with_retry(self._client.list_organizations)
            stored = await self._store.get(self._session_id)
        except Exception as e:
            if self._is_current(generation):
                self._fail()
            if is_retryable(e):
                logger.warning("Tenant resolution gave up: %s", e)
                return None
            raise
        if not self._is_current(generation):
            return self._context
        self.organizations = organizations
        # Suspended organizations are listed but refuse every scoped request.
        accessible = [
            org["id"]
            for org in organizations
            if org.get("status") == OrganizationStatus.ACTIVE.value
        ]
        if not accessible:
            self._fail()
            await self._store.clear(self._session_id)
            logger.info("Session %s has no accessible organization", self._session_id)
            return None
        tenant_id = stored if stored in accessible else accessible[0]
        context = self._apply(TenantContext(tenant_id=tenant_id))
        if stored != tenant_id:
            await self._store.set(self._session_id, tenant_id)
        return context

    async def switch(self, tenant_id: str, branch_id: str | None = None) -> TenantContext | None:
        """Switch the session to tenant_id after the server acknowledges it.

        A 403 or 404 from the server restores the last resolved context,
        even when another switch was still pending, and re-raises. Returns
        None (UNRESOLVED) when the API stayed unreachable.
        """
        generation = self._begin()
        try:
            await self._with_retry(lambda: self._client.switch_organization(tenant_id))
        except (AuthorizationDenied, ResourceNotFoundException):
            if self._is_current(generation):
                if self._last_resolved is not None:
                    self._apply(self._last_resolved)
                else:
                    self._fail()
            raise
        except Exception as e:
            if self._is_current(generation):
                self._fail()
            if is_retryable(e):
                logger.warning("Tenant switch to %s gave up: %s", tenant_id, e)
                return None
            raise
        if not self._is_current(generation):
            return self._context
        context = self._apply(TenantContext(tenant_id=tenant_id, branch_id=branch_id))
        await self._store.set(self._session_id, tenant_id)
        logger.info("Session %s switched to tenant %s", self._session_id, tenant_id)
        return context
