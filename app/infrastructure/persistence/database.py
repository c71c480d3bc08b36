"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations. The engine is created on first use
so importing this module never validates Settings.

Every session is bound to the request tenant (``app.current_tenant_id``,
transaction-local) so the row-level security policies on branch, customer
and loan only expose that tenant's rows. Sessions outside a tenant-scoped
request see none of them.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings
from app.core.tenant_context import get_tenant_id as get_request_tenant_id
from app.core.tenant_validation import is_valid_tenant_id_format
from app.domain.exceptions import SqlNotConfiguredException

logger = logging.getLogger(__name__)

engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None

_SET_TENANT_SQL = text("SELECT set_config('app.current_tenant_id', :tenant_id, true)")


def _ensure_engine() -> None:
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if not settings.database_url:
        return
    connect_args: dict[str, Any] = {}
    if "asyncpg" in settings.database_url:
        connect_args["command_timeout"] = settings.db_command_timeout or 60
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size or 10,
        max_overflow=settings.db_max_overflow or 20,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine | None:
    """Return the engine if DATABASE_URL is configured (creating it on first call)."""
    _ensure_engine()
    return engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory (for scripts and background jobs).

    Raises:
        SqlNotConfiguredException: When DATABASE_URL is not configured.
    """
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise SqlNotConfiguredException()
    return AsyncSessionLocal


async def dispose_engine() -> None:
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


async def bind_tenant(session: AsyncSession, tenant_id: str) -> None:
    """Bind the session's current transaction to tenant_id for RLS.

    The value is passed as a bound parameter to set_config, never
    interpolated. Malformed ids are not bound; RLS then hides every row.
    """
    if not is_valid_tenant_id_format(tenant_id):
        logger.warning("Refusing to bind malformed tenant id (length=%d)", len(tenant_id))
        return
    await session.execute(_SET_TENANT_SQL, {"tenant_id": tenant_id})


async def _bind_request_tenant(session: AsyncSession) -> None:
    tenant_id = get_request_tenant_id()
    if tenant_id:
        await bind_tenant(session, tenant_id)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Raises SqlNotConfiguredException when DATABASE_URL is not set.
    """
    factory = get_session_factory()
    async with factory() as session:
        await _bind_request_tenant(session)
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Commits when the request handler returns, rolls back on exception.
    """
    factory = get_session_factory()
    async with factory() as session:
        async with session.begin():
            await _bind_request_tenant(session)
            yield session
