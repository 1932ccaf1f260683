# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Fixtures for database integration tests using testcontainers."""

import pytest
import pytest_asyncio


@pytest.fixture(scope="session")
def pg_container():
    """Spin up a real PostgreSQL container for integration tests.

    Returns the connection URL for use with Database or PostgresAdapter.
    The container is automatically stopped and removed after the test session.
    Tests are skipped when testcontainers or Docker are unavailable.
    """
    try:
        from testcontainers.postgres import PostgresContainer
    except ImportError:
        pytest.skip("testcontainers not installed")

    postgres = PostgresContainer("postgres:15")
    try:
        postgres.start()
    except Exception as e:
        pytest.skip(f"PostgreSQL container unavailable: {e}")

    try:
        # testcontainers returns 'postgresql+psycopg2://' but get_adapter expects 'postgresql://'
        url = postgres.get_connection_url()
        yield url.replace("postgresql+psycopg2://", "postgresql://")
    finally:
        postgres.stop()


@pytest_asyncio.fixture
async def pg_db(pg_container):
    """Connected Database using the test record registry."""
    from tablemap import Database

    from tests.helpers import models

    db = Database(pg_container, pool_max_size=4, registry=models)
    await db.connect()

    yield db

    await db.shutdown()
