"""Tests for the tenant-scoped query cache and the tenant selection stores."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from app.client.query_cache import TenantScopedQueryCache, fetch_tenant_scoped
from app.client.selection_store import (
    InMemoryTenantSelectionStore,
    JsonFileTenantSelectionStore,
)
from app.domain.exceptions import TenantUnresolvedException


def test_entries_of_other_tenant_are_invisible() -> None:
    """Tenant A's 12 customers are never returned while tenant B is active."""
    cache = TenantScopedQueryCache()
    cache.activate("org-a")
    cache.put("org-a", "customers", [f"c{i}" for i in range(12)])
    cache.activate("org-b")
    assert cache.get("customers") is None
    assert cache.get("customers", default=[]) == []
    cache.activate("org-a")
    assert len(cache.get("customers")) == 12


def test_stale_put_is_dropped() -> None:
    cache = TenantScopedQueryCache()
    cache.activate("org-b")
    assert cache.put("org-a", "loans", ["l1"]) is False
    assert len(cache) == 0


def test_no_active_tenant_reads_nothing() -> None:
    cache = TenantScopedQueryCache()
    assert cache.put("org-a", "k", 1) is False
    assert cache.get("k") is None


def test_invalidate_and_clear() -> None:
    cache = TenantScopedQueryCache()
    cache.activate("org-a")
    cache.put("org-a", "customers", [1])
    cache.put("org-a", "loans", [2])
    cache.invalidate("customers")
    assert cache.get("customers") is None
    assert cache.get("loans") == [2]
    cache.invalidate_tenant_scoped()
    assert len(cache) == 0


async def test_fetch_tenant_scoped_caches_result() -> None:
    cache = TenantScopedQueryCache()
    cache.activate("org-a")
    fetch = AsyncMock(return_value=["c1"])
    assert await fetch_tenant_scoped(cache, "customers", fetch) == ["c1"]
    assert await fetch_tenant_scoped(cache, "customers", fetch) == ["c1"]
    fetch.assert_awaited_once()


async def test_fetch_tenant_scoped_caches_falsy_values() -> None:
    cache = TenantScopedQueryCache()
    cache.activate("org-a")
    fetch = AsyncMock(return_value=[])
    await fetch_tenant_scoped(cache, "customers", fetch)
    await fetch_tenant_scoped(cache, "customers", fetch)
    fetch.assert_awaited_once()


async def test_fetch_tenant_scoped_discards_response_after_switch() -> None:
    """A response for tenant A that lands after switching to B is not stored or returned."""
    cache = TenantScopedQueryCache()
    cache.activate("org-a")

    async def _slow_fetch() -> list[str]:
        cache.activate("org-b")
        return ["a-customer"]

    assert await fetch_tenant_scoped(cache, "customers", _slow_fetch) is None
    assert cache.get("customers") is None
    cache.activate("org-a")
    assert cache.get("customers") is None


async def test_fetch_tenant_scoped_requires_tenant() -> None:
    with pytest.raises(TenantUnresolvedException) as exc_info:
        await fetch_tenant_scoped(TenantScopedQueryCache(), "customers", AsyncMock())
    assert exc_info.value.error_code == "TENANT_UNRESOLVED"


async def test_in_memory_store() -> None:
    store = InMemoryTenantSelectionStore()
    assert await store.get("s1") is None
    await store.set("s1", "org-a")
    await store.set("s2", "org-b")
    assert await store.get("s1") == "org-a"
    await store.clear("s1")
    await store.clear("s1")
    assert await store.get("s1") is None
    assert await store.get("s2") == "org-b"


async def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "state" / "selection.json"
    await JsonFileTenantSelectionStore(path).set("s1", "org-a")

    reopened = JsonFileTenantSelectionStore(path)
    assert await reopened.get("s1") == "org-a"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["s1"]["tenant_id"] == "org-a"
    assert "updated_at" in data["s1"]

    await reopened.clear("s1")
    assert await reopened.get("s1") is None


async def test_json_file_store_missing_or_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "selection.json"
    store = JsonFileTenantSelectionStore(path)
    assert await store.get("s1") is None
    path.write_text("{not json", encoding="utf-8")
    assert await store.get("s1") is None
    await store.set("s1", "org-b")
    assert await store.get("s1") == "org-b"


async def test_json_file_store_concurrent_sets(tmp_path: Path) -> None:
    store = JsonFileTenantSelectionStore(tmp_path / "selection.json")
    await asyncio.gather(*(store.set(f"s{i}", f"org-{i}") for i in range(10)))
    assert [await store.get(f"s{i}") for i in range(10)] == [f"org-{i}" for i in range(10)]
    assert not list(tmp_path.glob(".selection-*"))
