"""Schema discovery MCP server

A Model Context Protocol (MCP) server exposing PostgreSQL schema discovery
(tables, views, columns, primary keys, foreign keys) as tools.
"""

import asyncio
import logging
import os
from typing import Any, Awaitable, Callable, Optional

from dotenv import load_dotenv
from mcp.server import Server
from mcp.types import TextContent, Tool
from pydantic import BaseModel

from pg_discovery.core import DatabaseConnection, PostgresDiscoverer, QueryExecutor
from pg_discovery.errors import DiscoveryError
from pg_discovery.models.config import DatabaseConfig
from pg_discovery.utils import dumps

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Response size limits (in characters) for MCP tool responses
MAX_RESPONSE_MODEL_DEFINITIONS = 5000  # Table and view listings
MAX_RESPONSE_MODEL_PROPERTIES = 8000  # Column listings
MAX_RESPONSE_KEYS = 3000  # Primary and foreign key listings

OPTION_PROPERTIES: dict[str, Any] = {
    "owner": {
        "type": "string",
        "description": "Schema name (optional, uses current schema if not specified)",
    },
    "offset": {"type": "integer", "minimum": 0, "description": "Rows to skip"},
    "limit": {"type": "integer", "minimum": 0, "description": "Maximum rows"},
}

TABLE_PROPERTY: dict[str, Any] = {
    "table": {"type": "string", "description": "Table name"},
}


def truncate_json_response(data: str, max_length: int) -> str:
    """
    Truncate JSON response to a maximum length.

    Args:
        data: JSON string to truncate
        max_length: Maximum length in characters

    Returns:
        Truncated JSON string with truncation notice if needed
    """
    if len(data) <= max_length:
        return data

    truncation_msg = (
        f"\n\n... [Response truncated: {len(data)} chars -> {max_length} chars]"
    )
    available_length = max_length - len(truncation_msg)

    if available_length < 100:
        return dumps(
            {
                "error": "Response too large",
                "original_size": len(data),
                "limit": max_length,
                "message": "Response exceeds size limit. Use owner, offset and limit to narrow it.",
            },
            indent=True,
        )

    truncated = data[:available_length]

    # Prefer cutting at a line boundary in the last 20%
    last_newline = truncated.rfind("\n")
    if last_newline > available_length * 0.8:
        truncated = truncated[:last_newline]

    return truncated + truncation_msg


def _table_tool(name: str, description: str) -> Tool:
    return Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {**TABLE_PROPERTY, "owner": OPTION_PROPERTIES["owner"]},
            "required": ["table"],
        },
    )


class DiscoveryMCPServer:
    """MCP server for PostgreSQL schema discovery."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize discovery MCP server.

        Args:
            config: Database configuration
        """
        self.config = config
        self.connection = DatabaseConnection(config)
        self.discoverer: Optional[PostgresDiscoverer] = None
        self.server = Server("pg-discovery-mcp")

    async def initialize(self) -> None:
        """Initialize the connection and discoverer."""
        await self.connection.initialize()
        self.discoverer = PostgresDiscoverer(QueryExecutor(self.connection))
        version = await self.connection.get_version()
        logger.info(
            f"Initialized discovery MCP server for database "
            f"{self.config.database_name} at {self.config.sanitized_url} ({version})"
        )

    def list_tools(self) -> list[Tool]:
        """Tools offered by this server."""
        return [
            Tool(
                name="discover_model_definitions",
                description="List tables, and optionally views, in a schema",
                inputSchema={
                    "type": "object",
                    "properties": {
                        **OPTION_PROPERTIES,
                        "all": {
                            "type": "boolean",
                            "description": "List across all schemas when no owner is given",
                            "default": False,
                        },
                        "views": {
                            "type": "boolean",
                            "description": "Whether to include views (default: false)",
                            "default": False,
                        },
                    },
                    "required": [],
                },
            ),
            _table_tool(
                "discover_model_properties",
                "List the columns of a table with native and portable types",
            ),
            _table_tool(
                "discover_primary_keys", "List the primary key columns of a table"
            ),
            _table_tool(
                "discover_foreign_keys", "List the foreign keys declared on a table"
            ),
            _table_tool(
                "discover_exported_foreign_keys",
                "List foreign keys in other tables that reference a table",
            ),
        ]

    def _handlers(self) -> dict[str, Callable[[dict[str, Any]], Awaitable[list[TextContent]]]]:
        return {
            "discover_model_definitions": self.handle_model_definitions,
            "discover_model_properties": self.handle_model_properties,
            "discover_primary_keys": self.handle_primary_keys,
            "discover_foreign_keys": self.handle_foreign_keys,
            "discover_exported_foreign_keys": self.handle_exported_foreign_keys,
        }

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Dispatch a tool call, reporting discovery errors as text."""
        handler = self._handlers().get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")

        try:
            return await handler(arguments or {})
        except DiscoveryError as e:
            logger.error(f"Error executing tool {name}: {e}")
            return [
                TextContent(
                    type="text",
                    text=dumps({"error": type(e).__name__, "message": str(e)}),
                )
            ]

    def _respond(self, items: list[BaseModel], max_length: int) -> list[TextContent]:
        response = dumps([item.model_dump(by_alias=True) for item in items], indent=True)
        return [TextContent(type="text", text=truncate_json_response(response, max_length))]

    # Tool handlers
    async def handle_model_definitions(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle discover_model_definitions request."""
        assert self.discoverer is not None
        tables = await self.discoverer.discover_model_definitions(arguments)
        return self._respond(tables or [], MAX_RESPONSE_MODEL_DEFINITIONS)

    async def handle_model_properties(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle discover_model_properties request."""
        assert self.discoverer is not None
        table, options = _split_table(arguments)
        columns = await self.discoverer.discover_model_properties(table, options)
        return self._respond(columns or [], MAX_RESPONSE_MODEL_PROPERTIES)

    async def handle_primary_keys(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle discover_primary_keys request."""
        assert self.discoverer is not None
        table, options = _split_table(arguments)
        keys = await self.discoverer.discover_primary_keys(table, options)
        return self._respond(keys or [], MAX_RESPONSE_KEYS)

    async def handle_foreign_keys(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle discover_foreign_keys request."""
        assert self.discoverer is not None
        table, options = _split_table(arguments)
        keys = await self.discoverer.discover_foreign_keys(table, options)
        return self._respond(keys or [], MAX_RESPONSE_KEYS)

    async def handle_exported_foreign_keys(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle discover_exported_foreign_keys request."""
        assert self.discoverer is not None
        table, options = _split_table(arguments)
        keys = await self.discoverer.discover_exported_foreign_keys(table, options)
        return self._respond(keys or [], MAX_RESPONSE_KEYS)

    async def cleanup(self) -> None:
        """Cleanup resources."""
        await self.connection.dispose()
        logger.info("Discovery MCP server cleaned up")


def _split_table(arguments: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
    options = dict(arguments)
    return options.pop("table", None), options


async def main() -> None:
    """Main entry point for the MCP server."""
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable must be set")

    config = DatabaseConfig(url=database_url)
    mcp_server = DiscoveryMCPServer(config)

    try:
        await mcp_server.initialize()

        @mcp_server.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return mcp_server.list_tools()

        @mcp_server.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await mcp_server.call_tool(name, arguments)

        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )

    finally:
        await mcp_server.cleanup()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'pg-discovery-mcp' console script.
    """
    logging.basicConfig(level=logging.INFO)

    # Windows-specific event loop policy
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
