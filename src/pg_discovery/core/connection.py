"""Database connection management with SQLAlchemy."""

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncGenerator, Generator, Optional

from sqlalchemy import Connection, Engine, create_engine, text
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from pg_discovery.models.config import DatabaseConfig

logger = logging.getLogger(__name__)

READ_ONLY_SQL = "SET SESSION CHARACTERISTICS AS TRANSACTION READ ONLY"


class DatabaseConnection:
    """Manages the async and blocking SQLAlchemy engines for one database.

    The async engine (asyncpg) serves the coroutine discovery operations; the
    blocking engine (psycopg) serves the ``*_sync`` variants. Each engine is
    created lazily by the first call that needs it.
    """

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection.

        Args:
            config: Database configuration with connection URL and pool settings
        """
        self.config = config
        self.engine: Optional[AsyncEngine] = None
        self.sync_engine: Optional[Engine] = None

    async def initialize(self) -> None:
        """Initialize the async engine."""
        if self.engine is not None:
            return  # Already initialized

        url, connect_args = self._asyncpg_url_and_args()
        self.engine = create_async_engine(
            url,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_pre_ping=True,  # Verify connections before using
            echo=self.config.echo_sql,
            connect_args=connect_args,
        )
        logger.info(f"Initialized async engine for {self.config.sanitized_url}")

    def initialize_sync(self) -> None:
        """Initialize the blocking engine."""
        if self.sync_engine is not None:
            return

        self.sync_engine = create_engine(
            self.config.sync_url,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_pre_ping=True,
            echo=self.config.echo_sql,
        )
        logger.info(f"Initialized sync engine for {self.config.sanitized_url}")

    def _asyncpg_url_and_args(self) -> tuple[str, dict]:
        """Move libpq-style ssl query options into asyncpg connect_args."""
        url_obj = make_url(self.config.async_url)
        connect_args: dict = {}

        if "sslmode" in url_obj.query:
            sslmode = url_obj.query["sslmode"]
            # Map sslmode to asyncpg's ssl parameter
            if sslmode in ["require", "prefer", "allow"]:
                connect_args["ssl"] = sslmode
            elif sslmode == "disable":
                connect_args["ssl"] = False
            # asyncpg rejects sslmode as an unexpected keyword
            url_obj = url_obj.difference_update_query(["sslmode"])
        elif "ssl" in url_obj.query:
            ssl_value = url_obj.query["ssl"]
            if ssl_value in ["require", "true", "1"]:
                connect_args["ssl"] = "require"
            elif ssl_value in ["false", "0", "disable"]:
                connect_args["ssl"] = False
            url_obj = url_obj.difference_update_query(["ssl"])

        return url_obj.render_as_string(hide_password=False), connect_args

    async def dispose(self) -> None:
        """Dispose of the connection pools and cleanup resources."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
        self.dispose_sync()

    def dispose_sync(self) -> None:
        """Dispose of the blocking engine only."""
        if self.sync_engine is not None:
            self.sync_engine.dispose()
            self.sync_engine = None

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Get a connection from the async pool as an async context manager.

        Yields:
            AsyncConnection for executing queries

        Raises:
            RuntimeError: If engine not initialized
        """
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )

        async with self.engine.connect() as conn:
            if self.config.read_only:
                await conn.execute(text(READ_ONLY_SQL))
            if self.config.statement_timeout:
                await conn.execute(text(self._timeout_sql()))
            yield conn

    @contextmanager
    def get_sync_connection(self) -> Generator[Connection, None, None]:
        """
        Get a connection from the blocking pool.

        Yields:
            Connection for executing queries

        Raises:
            RuntimeError: If the sync engine not initialized
        """
        if self.sync_engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize_sync() first."
            )

        with self.sync_engine.connect() as conn:
            if self.config.read_only:
                conn.execute(text(READ_ONLY_SQL))
            if self.config.statement_timeout:
                conn.execute(text(self._timeout_sql()))
            yield conn

    def _timeout_sql(self) -> str:
        # statement_timeout is a validated int, in seconds
        return f"SET statement_timeout = {int(self.config.statement_timeout) * 1000}"

    @property
    def is_initialized(self) -> bool:
        """Check if the async engine is initialized."""
        return self.engine is not None

    async def get_version(self) -> str:
        """
        Get database version string.

        Returns:
            Database version string
        """
        async with self.get_connection() as conn:
            result = await conn.execute(text("SELECT version()"))
            row = result.fetchone()
            return str(row[0]) if row else "Unknown"
