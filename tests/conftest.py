"""Pytest configuration and shared fixtures for discovery tests"""

import asyncio
import os
from typing import AsyncGenerator, Callable, Optional

import pytest
from dotenv import load_dotenv

from pg_discovery.core import DatabaseConnection, PostgresDiscoverer, QueryExecutor
from pg_discovery.models.config import DatabaseConfig
from pg_discovery.sql import DiscoveryQuery

# Load environment variables
load_dotenv()


class FakeExecutor:
    """In-memory stand-in for QueryExecutor.

    Records every query it receives and answers with rows produced by
    ``rows_for``. ``delay_for`` lets a test control completion order of
    concurrent async queries; ``error`` is raised from every call.
    """

    def __init__(
        self,
        rows_for: Optional[Callable[[DiscoveryQuery], list]] = None,
        delay_for: Optional[Callable[[DiscoveryQuery], float]] = None,
        error: Optional[BaseException] = None,
    ):
        self.rows_for = rows_for or (lambda query: [])
        self.delay_for = delay_for or (lambda query: 0)
        self.error = error
        self.queries: list[DiscoveryQuery] = []
        self.completed: list[DiscoveryQuery] = []

    async def execute(self, query: DiscoveryQuery) -> list:
        self.queries.append(query)
        delay = self.delay_for(query)
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        self.completed.append(query)
        return [dict(row) for row in self.rows_for(query)]

    def execute_sync(self, query: DiscoveryQuery) -> list:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        self.completed.append(query)
        return [dict(row) for row in self.rows_for(query)]


TABLE_ROWS = [
    {"type": "table", "name": "customers", "owner": "public"},
    {"type": "table", "name": "orders", "owner": "public"},
]

VIEW_ROWS = [
    {"type": "view", "name": "order_totals", "owner": "public"},
]

COLUMN_ROWS = [
    {
        "owner": "public",
        "tableName": "orders",
        "columnName": "id",
        "dataType": "integer",
        "dataLength": None,
        "dataPrecision": 32,
        "dataScale": 0,
        "nullable": "NO",
    },
    {
        "owner": "public",
        "tableName": "orders",
        "columnName": "shipped",
        "dataType": "character",
        "dataLength": 1,
        "dataPrecision": None,
        "dataScale": None,
        "nullable": "YES",
    },
    {
        "owner": "public",
        "tableName": "orders",
        "columnName": "placed_at",
        "dataType": "timestamp without time zone",
        "dataLength": None,
        "dataPrecision": None,
        "dataScale": None,
        "nullable": "NO",
    },
]


def relation_rows(query: DiscoveryQuery) -> list:
    """Answer tables and views queries with canned rows."""
    if "information_schema.views" in query.sql:
        return VIEW_ROWS
    return TABLE_ROWS


# ==================== Fake Executor Fixtures ====================


@pytest.fixture
def executor_factory() -> type[FakeExecutor]:
    """The FakeExecutor class, for tests needing custom rows, delays or errors"""
    return FakeExecutor


@pytest.fixture
def column_rows() -> list:
    """Catalog rows for the columns of an orders table"""
    return [dict(row) for row in COLUMN_ROWS]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """Executor that records queries and returns table/view rows"""
    return FakeExecutor(rows_for=relation_rows)


@pytest.fixture
def discoverer(fake_executor: FakeExecutor) -> PostgresDiscoverer:
    """Discoverer wired to the fake executor"""
    return PostgresDiscoverer(fake_executor)


# ==================== PostgreSQL Fixtures ====================


@pytest.fixture(scope="session")
def pg_database_url() -> Optional[str]:
    """PostgreSQL test database URL from environment"""
    return os.getenv("PG_TEST_DATABASE_URL")


@pytest.fixture
async def pg_config(pg_database_url: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_database_url:
        pytest.skip("PG_TEST_DATABASE_URL not set in environment")
    return DatabaseConfig(url=pg_database_url)


@pytest.fixture
async def pg_connection(
    pg_config: DatabaseConfig,
) -> AsyncGenerator[DatabaseConnection, None]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    await connection.initialize()
    try:
        yield connection
    finally:
        await connection.dispose()


@pytest.fixture
async def pg_discoverer(pg_connection: DatabaseConnection) -> PostgresDiscoverer:
    """Discoverer backed by a live PostgreSQL database"""
    return PostgresDiscoverer(QueryExecutor(pg_connection))


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
