"""Unit tests for TenantScopedRepository.get_scoped (ownership before row load)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.exceptions import CrossTenantAccessException, ResourceNotFoundException
from app.infrastructure.persistence.repositories.lending_repo import CustomerRepository


def _result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


async def test_foreign_record_is_cross_tenant_without_loading_row() -> None:
    """The row is hidden by RLS for org-b; the ownership ledger still names org-a."""
    db = AsyncMock()
    db.execute.return_value = _result("org-a")
    with pytest.raises(CrossTenantAccessException):
        await CustomerRepository(db).get_scoped("cust-a", "org-b")
    assert db.execute.await_count == 1


async def test_unknown_record_is_not_found() -> None:
    db = AsyncMock()
    db.execute.return_value = _result(None)
    with pytest.raises(ResourceNotFoundException):
        await CustomerRepository(db).get_scoped("cust-missing", "org-a")


async def test_own_record_is_loaded() -> None:
    row = MagicMock(tenant_id="org-a")
    db = AsyncMock()
    db.execute.side_effect = [_result("org-a"), _result(row)]
    assert await CustomerRepository(db).get_scoped("cust-a", "org-a") is row
