"""Database session dependencies for FastAPI.

Each pool (write, read) is created on first use and shared for the life
of the process. Sessions never auto-commit: services open their own
transactions with ``async with session.begin()``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

_probe = DefaultConnectionProbe()


@dataclass
class _Pool:
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]


_FACTORIES: dict[str, Callable[[DatabaseSettings], AsyncEngine]] = {
    "write": create_write_engine,
    "read": create_read_engine,
}
_pools: dict[str, _Pool] = {}
_pools_lock = threading.Lock()


def _pool(role: str) -> _Pool:
    pool = _pools.get(role)
    if pool is None:
        with _pools_lock:
            pool = _pools.get(role)
            if pool is None:
                settings = get_database_settings()
                engine = _FACTORIES[role](settings)
                pool = _Pool(
                    engine=engine,
                    sessionmaker=async_sessionmaker(
                        engine, expire_on_commit=False, class_=AsyncSession
                    ),
                )
                _pools[role] = pool
                _probe.engine_created(
                    role=role, host=settings.host, database=settings.database
                )
    return pool


def get_write_engine() -> AsyncEngine:
    """Engine for mutations and change feed NOTIFY."""
    return _pool("write").engine


def get_read_engine() -> AsyncEngine:
    """Engine for queries and role lookups."""
    return _pool("read").engine


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a write session (FastAPI dependency)."""
    async with _pool("write").sessionmaker() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for SELECTs only (FastAPI dependency)."""
    async with _pool("read").sessionmaker() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose every pool; the next request creates fresh ones.

    Called on application shutdown.
    """
    with _pools_lock:
        pools = list(_pools.items())
        _pools.clear()

    for role, pool in pools:
        await pool.engine.dispose()
        _probe.pool_closed(role=role)
