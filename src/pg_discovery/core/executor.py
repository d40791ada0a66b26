"""Row-set execution of catalog queries."""

import asyncio
import logging
import time
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pg_discovery.core.connection import DatabaseConnection
from pg_discovery.errors import QueryError
from pg_discovery.sql.builders import DiscoveryQuery
from pg_discovery.utils import convert_rows_to_json_safe

logger = logging.getLogger(__name__)

# asyncpg reports connect failures as plain OS errors and timeouts, not
# through the DBAPI exception hierarchy
DRIVER_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class QueryExecutor:
    """Runs discovery queries and returns rows as dictionaries."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize query executor.

        Args:
            connection: Database connection manager
        """
        self.connection = connection

    async def execute(self, query: DiscoveryQuery) -> list[dict[str, Any]]:
        """
        Execute a catalog query on the async engine.

        Args:
            query: SQL text and bound parameters

        Returns:
            Rows as column-name keyed dictionaries

        Raises:
            QueryError: If the driver reports any failure
        """
        await self.connection.initialize()
        start_time = time.time()
        logger.debug(f"Executing discovery query: {query.sql} {query.params}")

        try:
            async with self.connection.get_connection() as conn:
                result = await conn.execute(text(query.sql), query.params)
                columns = list(result.keys())
                rows = [dict(zip(columns, row)) for row in result.fetchall()]
        except DRIVER_ERRORS as e:
            logger.warning(f"Discovery query failed: {e}")
            raise QueryError.from_exception(e, query.sql) from e

        return self._finish(rows, start_time)

    def execute_sync(self, query: DiscoveryQuery) -> list[dict[str, Any]]:
        """
        Execute a catalog query on the blocking engine.

        Args:
            query: SQL text and bound parameters

        Returns:
            Rows as column-name keyed dictionaries

        Raises:
            QueryError: If the driver reports any failure
        """
        self.connection.initialize_sync()
        start_time = time.time()
        logger.debug(f"Executing discovery query (sync): {query.sql} {query.params}")

        try:
            with self.connection.get_sync_connection() as conn:
                result = conn.execute(text(query.sql), query.params)
                columns = list(result.keys())
                rows = [dict(zip(columns, row)) for row in result.fetchall()]
        except DRIVER_ERRORS as e:
            logger.warning(f"Discovery query failed: {e}")
            raise QueryError.from_exception(e, query.sql) from e

        return self._finish(rows, start_time)

    def _finish(self, rows: list[dict[str, Any]], start_time: float) -> list[dict[str, Any]]:
        execution_time = (time.time() - start_time) * 1000  # Convert to ms
        logger.debug(f"Discovery query returned {len(rows)} rows in {execution_time:.1f} ms")
        return convert_rows_to_json_safe(rows)
