"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when the database is unreachable.

Override connection settings with environment variables:
    CAMPUS_RESERVE_TEST_DB_HOST, CAMPUS_RESERVE_TEST_DB_PORT, etc.
"""

import os
from collections.abc import AsyncGenerator

import pytest
from pydantic import SecretStr
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import iam.infrastructure.models  # noqa: F401
import reservations.infrastructure.models  # noqa: F401
from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings


@pytest.fixture
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests."""
    return DatabaseSettings(
        host=os.getenv("CAMPUS_RESERVE_TEST_DB_HOST", "localhost"),
        port=int(os.getenv("CAMPUS_RESERVE_TEST_DB_PORT", "5432")),
        database=os.getenv("CAMPUS_RESERVE_TEST_DB_DATABASE", "campus_reserve_test"),
        username=os.getenv("CAMPUS_RESERVE_TEST_DB_USERNAME", "campus_reserve"),
        password=SecretStr(
            os.getenv("CAMPUS_RESERVE_TEST_DB_PASSWORD", "campus_reserve_dev_password")
        ),
    )


@pytest.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with a freshly created schema, dropped after the test."""
    engine = create_write_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, DBAPIError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
