"""Async SQLAlchemy engine factories.

The service keeps two pools against the same PostgreSQL database: a write
pool for submissions, transitions, role changes and NOTIFY, and a read pool
for list and lookup queries. Each pool tags its connections with an
``application_name`` so they can be told apart in ``pg_stat_activity``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "create_write_engine",
    "create_read_engine",
    "build_async_url",
    "build_listen_dsn",
]

APPLICATION_NAME = "campus-reserve"


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine used for mutations and change feed NOTIFY."""
    return _create_engine(settings, role="write")


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine used for queries.

    Read-only enforcement is left to database role permissions; callers
    only use this pool for SELECTs.
    """
    return _create_engine(settings, role="read")


def _create_engine(settings: DatabaseSettings, role: str) -> AsyncEngine:
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_max_connections,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {"application_name": f"{APPLICATION_NAME}-{role}"}
        },
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Build the SQLAlchemy URL (``postgresql+asyncpg://...``).

    Credentials are percent-encoded by SQLAlchemy's URL builder.
    """
    return _build_url(settings, drivername="postgresql+asyncpg")


def build_listen_dsn(settings: DatabaseSettings) -> str:
    """Build a plain ``postgresql://`` DSN for asyncpg LISTEN connections.

    asyncpg does not understand SQLAlchemy's ``+asyncpg`` driver suffix.
    """
    return _build_url(settings, drivername="postgresql")


def _build_url(settings: DatabaseSettings, drivername: str) -> str:
    url = URL.create(
        drivername=drivername,
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)
