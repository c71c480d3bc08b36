"""Unit tests for TenantContextResolver (selection, retry, switch, stale responses)."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from app.client.permissions_gate import PermissionsGate
from app.client.query_cache import TenantScopedQueryCache
from app.client.selection_store import InMemoryTenantSelectionStore
from app.client.tenant_resolver import RetryPolicy, TenantContextResolver, is_retryable
from app.domain.enums import TenantResolutionState
from app.domain.exceptions import AuthorizationDenied, ResourceNotFoundException

SESSION = "session-1"
ORGS = [
    {"id": "org-a", "name": "Alpha", "status": "active"},
    {"id": "org-b", "name": "Beta", "status": "active"},
]


def _server_error(status: int = 503) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://api.test/api/v1/organizations")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("server error", request=request, response=response)


class FakeClient:
    """Stands in for MoneyflowClient: records the tenant header it is given."""

    def __init__(self) -> None:
        self.tenant_id: str | None = None
        self.branch_id: str | None = None
        self.list_organizations = AsyncMock(return_value=list(ORGS))
        self.switch_organization = AsyncMock(return_value={"organization_id": "org-b"})

    def set_tenant(self, tenant_id: str | None, branch_id: str | None = None) -> None:
        self.tenant_id = tenant_id
        self.branch_id = branch_id if tenant_id else None


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def store() -> InMemoryTenantSelectionStore:
    return InMemoryTenantSelectionStore()


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def resolver(client: FakeClient, store: InMemoryTenantSelectionStore, sleep: AsyncMock):
    return TenantContextResolver(client, store, SESSION, sleep=sleep)


async def test_initial_state(resolver: TenantContextResolver) -> None:
    assert resolver.state is TenantResolutionState.UNINITIALIZED
    assert resolver.context is None


async def test_resolve_prefers_stored_selection(
    resolver: TenantContextResolver, client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    await store.set(SESSION, "org-b")
    context = await resolver.resolve()
    assert context is not None and context.tenant_id == "org-b"
    assert resolver.state is TenantResolutionState.RESOLVED
    assert client.tenant_id == "org-b"
    assert resolver.cache.active_tenant_id == "org-b"


async def test_resolve_falls_back_to_first_and_persists(
    resolver: TenantContextResolver, store: InMemoryTenantSelectionStore
) -> None:
    """A stored selection the identity lost access to is replaced by the first organization."""
    await store.set(SESSION, "org-revoked")
    context = await resolver.resolve()
    assert context is not None and context.tenant_id == "org-a"
    assert await store.get(SESSION) == "org-a"


async def test_resolve_without_organizations_is_unresolved(
    resolver: TenantContextResolver, client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    await store.set(SESSION, "org-a")
    client.list_organizations.return_value = []
    assert await resolver.resolve() is None
    assert resolver.state is TenantResolutionState.UNRESOLVED
    assert client.tenant_id is None
    assert await store.get(SESSION) is None


async def test_resolve_skips_suspended_organizations(
    resolver: TenantContextResolver, client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    await store.set(SESSION, "org-s")
    client.list_organizations.return_value = [
        {"id": "org-s", "name": "Alpha Suspended", "status": "suspended"},
        {"id": "org-b", "name": "Beta", "status": "active"},
    ]
    context = await resolver.resolve()
    assert context is not None and context.tenant_id == "org-b"
    assert client.tenant_id == "org-b"
    assert await store.get(SESSION) == "org-b"


async def test_resolve_with_only_suspended_organizations_is_unresolved(
    resolver: TenantContextResolver, client: FakeClient
) -> None:
    client.list_organizations.return_value = [
        {"id": "org-s", "name": "Alpha Suspended", "status": "suspended"}
    ]
    assert await resolver.resolve() is None
    assert resolver.state is TenantResolutionState.UNRESOLVED
    assert client.tenant_id is None


async def test_resolve_retries_with_capped_backoff(
    client: FakeClient, store: InMemoryTenantSelectionStore, sleep: AsyncMock
) -> None:
    """Transient failures are retried; the delays grow and stay capped."""
    client.list_organizations.side_effect = [
        httpx.ConnectError("down"),
        _server_error(502),
        list(ORGS),
    ]
    resolver = TenantContextResolver(
        client,
        store,
        SESSION,
        retry_policy=RetryPolicy(attempts=3, base_delay=1.0, max_delay=1.5),
        sleep=sleep,
    )
    context = await resolver.resolve()
    assert context is not None and context.tenant_id == "org-a"
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 1.5]


async def test_resolve_gives_up_after_retries(
    resolver: TenantContextResolver, client: FakeClient, sleep: AsyncMock
) -> None:
    client.list_organizations.side_effect = httpx.ConnectTimeout("slow")
    assert await resolver.resolve() is None
    assert resolver.state is TenantResolutionState.UNRESOLVED
    assert client.list_organizations.await_count == 3
    assert sleep.await_count == 2


async def test_resolve_does_not_retry_client_errors(
    resolver: TenantContextResolver, client: FakeClient, sleep: AsyncMock
) -> None:
    client.list_organizations.side_effect = AuthorizationDenied()
    with pytest.raises(AuthorizationDenied):
        await resolver.resolve()
    assert resolver.state is TenantResolutionState.UNRESOLVED
    sleep.assert_not_awaited()


async def test_switch_updates_header_store_and_context(
    resolver: TenantContextResolver, client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    await resolver.resolve()
    context = await resolver.switch("org-b", branch_id="br-1")
    assert context is not None
    assert (context.tenant_id, context.branch_id) == ("org-b", "br-1")
    assert (client.tenant_id, client.branch_id) == ("org-b", "br-1")
    assert await store.get(SESSION) == "org-b"
    client.switch_organization.assert_awaited_once_with("org-b")


async def test_switch_drops_previous_tenant_reads(
    resolver: TenantContextResolver, client: FakeClient
) -> None:
    """Cached tenant A records are never visible after switching to B."""
    await resolver.resolve()
    resolver.cache.put("org-a", "customers", [{"id": f"c{i}"} for i in range(12)])
    assert len(resolver.cache.get("customers")) == 12

    await resolver.switch("org-b")

    assert resolver.cache.get("customers") is None
    assert len(resolver.cache) == 0


@pytest.mark.parametrize(
    "error", [AuthorizationDenied(), ResourceNotFoundException("organization", "org-x")]
)
async def test_rejected_switch_restores_previous_context(
    resolver: TenantContextResolver,
    client: FakeClient,
    store: InMemoryTenantSelectionStore,
    error: Exception,
) -> None:
    await resolver.resolve()
    client.switch_organization.side_effect = error
    with pytest.raises(type(error)):
        await resolver.switch("org-x")
    assert resolver.state is TenantResolutionState.RESOLVED
    assert resolver.context is not None and resolver.context.tenant_id == "org-a"
    assert client.tenant_id == "org-a"
    assert await store.get(SESSION) == "org-a"


async def test_rejected_first_switch_is_unresolved(
    resolver: TenantContextResolver, client: FakeClient
) -> None:
    client.switch_organization.side_effect = AuthorizationDenied()
    with pytest.raises(AuthorizationDenied):
        await resolver.switch("org-x")
    assert resolver.state is TenantResolutionState.UNRESOLVED
    assert client.tenant_id is None


async def test_rejected_switch_during_pending_switch_restores_last_context(
    resolver: TenantContextResolver, client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    """A switch refused while an earlier one is in flight falls back to the last resolved tenant."""
    await resolver.resolve()
    release_slow = asyncio.Event()

    async def _switch(tenant_id: str) -> dict:
        if tenant_id == "org-slow":
            await release_slow.wait()
            return {"organization_id": tenant_id}
        raise AuthorizationDenied()

    client.switch_organization.side_effect = _switch
    slow = asyncio.create_task(resolver.switch("org-slow"))
    await asyncio.sleep(0)
    with pytest.raises(AuthorizationDenied):
        await resolver.switch("org-x")
    release_slow.set()
    await slow

    assert resolver.state is TenantResolutionState.RESOLVED
    assert resolver.context is not None and resolver.context.tenant_id == "org-a"
    assert client.tenant_id == "org-a"
    assert await store.get(SESSION) == "org-a"


async def test_unreachable_switch_is_unresolved(
    resolver: TenantContextResolver, client: FakeClient
) -> None:
    await resolver.resolve()
    client.switch_organization.side_effect = httpx.ConnectError("down")
    assert await resolver.switch("org-b") is None
    assert resolver.state is TenantResolutionState.UNRESOLVED
    assert client.tenant_id is None


async def test_switch_clears_tenant_before_request_is_sent(
    resolver: TenantContextResolver, client: FakeClient
) -> None:
    """While the switch is in flight no tenant header is attached."""
    await resolver.resolve()
    seen: list[str | None] = []

    async def _switch(tenant_id: str) -> dict:
        seen.append(client.tenant_id)
        seen.append(resolver.state.value)
        return {"organization_id": tenant_id}

    client.switch_organization.side_effect = _switch
    await resolver.switch("org-b")
    assert seen == [None, "resolving"]


async def test_superseded_switch_response_is_ignored(
    resolver: TenantContextResolver, client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    """A slow switch finishing after a newer one never overwrites it."""
    await resolver.resolve()
    release_slow = asyncio.Event()

    async def _switch(tenant_id: str) -> dict:
        if tenant_id == "org-slow":
            await release_slow.wait()
        return {"organization_id": tenant_id}

    client.switch_organization.side_effect = _switch
    slow = asyncio.create_task(resolver.switch("org-slow"))
    await asyncio.sleep(0)
    await resolver.switch("org-b")
    release_slow.set()
    result = await slow

    assert result is not None and result.tenant_id == "org-b"
    assert resolver.context is not None and resolver.context.tenant_id == "org-b"
    assert client.tenant_id == "org-b"
    assert await store.get(SESSION) == "org-b"


async def test_resolving_clears_permissions_gate(
    client: FakeClient, store: InMemoryTenantSelectionStore, view_factory
) -> None:
    gate = PermissionsGate(MagicMock())
    gate.view = view_factory()
    gate._member_levels = {}
    resolver = TenantContextResolver(client, store, SESSION, gate=gate)
    await resolver.resolve()
    assert gate.view is None
    assert gate.loaded is False


def test_retry_policy_delays() -> None:
    policy = RetryPolicy(attempts=5, base_delay=0.5, max_delay=4.0)
    assert [policy.delay(n) for n in range(5)] == [0.5, 1.0, 2.0, 4.0, 4.0]


def test_is_retryable() -> None:
    assert is_retryable(httpx.ReadTimeout("t")) is True
    assert is_retryable(_server_error(500)) is True
    assert is_retryable(_server_error(404)) is False
    assert is_retryable(AuthorizationDenied()) is False


async def test_shared_cache_instance(
    client: FakeClient, store: InMemoryTenantSelectionStore
) -> None:
    cache = TenantScopedQueryCache()
    resolver = TenantContextResolver(client, store, SESSION, cache=cache)
    await resolver.resolve()
    assert cache.active_tenant_id == "org-a"
