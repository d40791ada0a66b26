"""Schema discovery operations over information_schema."""

import asyncio
from typing import Any, Awaitable, Optional, Protocol, TypeVar

from pg_discovery.core.arguments import (
    Callback,
    OptionsArg,
    normalize_args,
    normalize_options,
)
from pg_discovery.errors import QueryError
from pg_discovery.models.descriptors import (
    ColumnDescriptor,
    ForeignKeyDescriptor,
    PrimaryKeyDescriptor,
    TableDescriptor,
)
from pg_discovery.models.options import DiscoveryOptions
from pg_discovery.sql.builders import (
    DiscoveryQuery,
    query_columns,
    query_exported_foreign_keys,
    query_foreign_keys,
    query_primary_keys,
    query_tables,
    query_views,
)
from pg_discovery.types import map_type


T = TypeVar("T")
Row = dict[str, Any]


class RowExecutor(Protocol):
    """Anything that can run a DiscoveryQuery and return rows."""

    async def execute(self, query: DiscoveryQuery) -> list[Row]: ...

    def execute_sync(self, query: DiscoveryQuery) -> list[Row]: ...


class SchemaDiscoverer(Protocol):
    """Schema discovery capability offered by a database connector."""

    async def discover_model_definitions(
        self, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[TableDescriptor]]: ...

    def discover_model_definitions_sync(
        self, options: OptionsArg = None
    ) -> list[TableDescriptor]: ...

    async def discover_model_properties(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[ColumnDescriptor]]: ...

    def discover_model_properties_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[ColumnDescriptor]: ...

    async def discover_primary_keys(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[PrimaryKeyDescriptor]]: ...

    def discover_primary_keys_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[PrimaryKeyDescriptor]: ...

    async def discover_foreign_keys(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[ForeignKeyDescriptor]]: ...

    def discover_foreign_keys_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[ForeignKeyDescriptor]: ...

    async def discover_exported_foreign_keys(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[ForeignKeyDescriptor]]: ...

    def discover_exported_foreign_keys_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[ForeignKeyDescriptor]: ...


def _to_columns(rows: list[Row]) -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor.model_validate(
            {**row, "type": map_type(row.get("dataType"), row.get("dataLength"))}
        )
        for row in rows
    ]


def _to_tables(rows: list[Row]) -> list[TableDescriptor]:
    return [TableDescriptor.model_validate(row) for row in rows]


def _to_primary_keys(rows: list[Row]) -> list[PrimaryKeyDescriptor]:
    return [PrimaryKeyDescriptor.model_validate(row) for row in rows]


def _to_foreign_keys(rows: list[Row]) -> list[ForeignKeyDescriptor]:
    return [ForeignKeyDescriptor.model_validate(row) for row in rows]


async def _deliver(
    result: Awaitable[list[T]], callback: Optional[Callback]
) -> Optional[list[T]]:
    """
    Await a discovery result and hand it to the callback, if any.

    Without a callback, QueryError propagates to the caller. With one, the
    error is passed as the callback's first argument instead and None is
    returned.
    """
    if callback is None:
        return await result

    try:
        rows = await result
    except QueryError as e:
        callback(e, None)
        return None

    callback(None, rows)
    return rows


class PostgresDiscoverer:
    """Schema discovery for PostgreSQL, built on information_schema."""

    def __init__(self, executor: RowExecutor):
        """
        Initialize the discoverer.

        Args:
            executor: Query executor used for every catalog query
        """
        self.executor = executor

    # Model definitions (tables and views)

    async def _model_definitions(self, options: DiscoveryOptions) -> list[TableDescriptor]:
        queries = [query_tables(options)]
        views = query_views(options)
        if views is not None:
            queries.append(views)

        tasks = [asyncio.ensure_future(self.executor.execute(q)) for q in queries]
        try:
            # gather keeps argument order, so tables always precede views
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        merged: list[Row] = []
        for rows in results:
            merged.extend(rows)
        return _to_tables(merged)

    async def discover_model_definitions(
        self, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[TableDescriptor]]:
        """
        Discover tables, and views when ``options.views`` is set.

        The tables and views queries run concurrently; table rows always come
        before view rows.

        Args:
            options: Discovery options (owner/schema, all, views, offset/skip, limit)
            callback: Optional ``callback(error, rows)``

        Returns:
            Table descriptors, or None if a callback received an error
        """
        opts, callback = normalize_options(options, callback)
        return await _deliver(self._model_definitions(opts), callback)

    def discover_model_definitions_sync(
        self, options: OptionsArg = None
    ) -> list[TableDescriptor]:
        """Discover tables (and views) synchronously."""
        opts, _ = normalize_options(options)
        rows = self.executor.execute_sync(query_tables(opts))
        views = query_views(opts)
        if views is not None:
            rows = rows + self.executor.execute_sync(views)
        return _to_tables(rows)

    # Model properties (columns)

    async def _model_properties(self, query: DiscoveryQuery) -> list[ColumnDescriptor]:
        return _to_columns(await self.executor.execute(query))

    async def discover_model_properties(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[ColumnDescriptor]]:
        """
        Discover the columns of a table, with portable types.

        Args:
            table: Table name
            options: Discovery options; owner/schema restricts the schema
            callback: Optional ``callback(error, rows)``

        Returns:
            Column descriptors ordered by table and ordinal position
        """
        args = normalize_args(table, options, callback)
        query = query_columns(args.owner, args.table)
        return await _deliver(self._model_properties(query), args.callback)

    def discover_model_properties_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[ColumnDescriptor]:
        """Discover the columns of a table synchronously."""
        args = normalize_args(table, options)
        return _to_columns(self.executor.execute_sync(query_columns(args.owner, args.table)))

    # Primary keys

    async def _primary_keys(self, query: DiscoveryQuery) -> list[PrimaryKeyDescriptor]:
        return _to_primary_keys(await self.executor.execute(query))

    async def discover_primary_keys(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[PrimaryKeyDescriptor]]:
        """Discover the primary key columns of a table."""
        args = normalize_args(table, options, callback)
        query = query_primary_keys(args.owner, args.table)
        return await _deliver(self._primary_keys(query), args.callback)

    def discover_primary_keys_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[PrimaryKeyDescriptor]:
        """Discover the primary key columns of a table synchronously."""
        args = normalize_args(table, options)
        return _to_primary_keys(
            self.executor.execute_sync(query_primary_keys(args.owner, args.table))
        )

    # Foreign keys

    async def _foreign_keys(self, query: DiscoveryQuery) -> list[ForeignKeyDescriptor]:
        return _to_foreign_keys(await self.executor.execute(query))

    async def discover_foreign_keys(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[ForeignKeyDescriptor]]:
        """Discover the foreign keys declared on a table."""
        args = normalize_args(table, options, callback)
        query = query_foreign_keys(args.owner, args.table)
        return await _deliver(self._foreign_keys(query), args.callback)

    def discover_foreign_keys_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[ForeignKeyDescriptor]:
        """Discover the foreign keys declared on a table synchronously."""
        args = normalize_args(table, options)
        return _to_foreign_keys(
            self.executor.execute_sync(query_foreign_keys(args.owner, args.table))
        )

    async def discover_exported_foreign_keys(
        self, table: str, options: OptionsArg = None, callback: Optional[Callback] = None
    ) -> Optional[list[ForeignKeyDescriptor]]:
        """
        Discover foreign keys in other tables that reference this table.

        Here owner/schema filters the referenced side, not the referencing one.
        """
        args = normalize_args(table, options, callback)
        query = query_exported_foreign_keys(args.owner, args.table)
        return await _deliver(self._foreign_keys(query), args.callback)

    def discover_exported_foreign_keys_sync(
        self, table: str, options: OptionsArg = None
    ) -> list[ForeignKeyDescriptor]:
        """Discover foreign keys referencing this table synchronously."""
        args = normalize_args(table, options)
        return _to_foreign_keys(
            self.executor.execute_sync(query_exported_foreign_keys(args.owner, args.table))
        )
