"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (persistence/migrations). Engine and session
factory are created lazily on first use so import does not load settings.

Two kinds of sessions:
- get_db / platform_transaction: platform tables (tenant, feature flags),
  no tenant binding.
- open_tenant_session(tenant): tenant-scoped tables. Refuses to open unless
  the tenant is present, well-formed and active, then sets app.tenant_id for
  the transaction so row-level security policies scope every statement.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from msls.core.config import get_settings
from msls.core.tenant_validation import is_valid_tenant_id_format
from msls.domain.context import TenantContext
from msls.domain.exceptions import (
    InvalidTenantIdException,
    SqlNotConfiguredException,
    TenantRequiredException,
    TenantUnavailableException,
)

logger = logging.getLogger(__name__)

# Session variable read by RLS policies: current_setting('app.tenant_id', true).
RLS_TENANT_SETTING = "app.tenant_id"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use (pool limits from DB_* settings)."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    db = get_settings().database
    engine = create_async_engine(
        db.url,
        echo=db.echo,
        pool_pre_ping=True,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_recycle=db.pool_recycle,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info(
        "Database engine created: %s:%s/%s (pool_size=%s, max_overflow=%s)",
        db.host,
        db.port,
        db.name,
        db.pool_size,
        db.max_overflow,
    )


def _session_factory() -> async_sessionmaker[AsyncSession]:
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise SqlNotConfiguredException()
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine (app shutdown); next use recreates it."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def require_tenant_binding(tenant: TenantContext | None) -> str:
    """Return the tenant id to bind, or raise before anything reaches storage.

    Raises:
        TenantRequiredException: No tenant.
        InvalidTenantIdException: Malformed tenant id.
        TenantUnavailableException: Tenant is not active.
    """
    if tenant is None or not tenant.tenant_id:
        raise TenantRequiredException()
    if not is_valid_tenant_id_format(tenant.tenant_id):
        raise InvalidTenantIdException()
    if not tenant.is_active:
        raise TenantUnavailableException(tenant.tenant_id, tenant.status)
    return tenant.tenant_id


async def bind_tenant(session: AsyncSession, tenant: TenantContext | None) -> None:
    """Set app.tenant_id for the session's current transaction (bound parameter)."""
    tenant_id = require_tenant_binding(tenant)
    await session.execute(
        text("SELECT set_config(:name, :value, true)"),
        {"name": RLS_TENANT_SETTING, "value": tenant_id},
    )


@asynccontextmanager
async def open_tenant_session(
    tenant: TenantContext | None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """Yield a tenant-bound session inside one transaction.

    Commits on success, rolls back on exception. The tenant is checked before
    a connection is taken from the pool.
    """
    require_tenant_binding(tenant)
    factory = session_factory or _session_factory()
    async with factory() as session:
        async with session.begin():
            await bind_tenant(session, tenant)
            yield session


async def ping_database() -> bool:
    """Return True when a trivial query succeeds (readiness probe)."""
    try:
        async with _session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, SqlNotConfiguredException) as e:
        logger.warning("Database readiness check failed: %s", e)
        return False
    return True


async def get_db() -> AsyncIterator[AsyncSession]:
    """Platform session dependency for read operations (no tenant binding, no commit)."""
    async with _session_factory()() as session:
        yield session


@asynccontextmanager
async def platform_transaction() -> AsyncIterator[AsyncSession]:
    """Platform session inside one transaction; commits on success, rolls back on exception."""
    async with _session_factory()() as session:
        async with session.begin():
            yield session

