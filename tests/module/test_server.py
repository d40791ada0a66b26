"""Module Tests for DiscoveryMCPServer tool handling

Exercises tool listing and dispatch with the discoverer wired to an
in-memory executor, so no database or MCP transport is needed.
"""

import json

import pytest
from mcp.types import TextContent

from pg_discovery.core import PostgresDiscoverer
from pg_discovery.models.config import DatabaseConfig
from pg_discovery.server import DiscoveryMCPServer, truncate_json_response


@pytest.fixture
def server(fake_executor) -> DiscoveryMCPServer:
    """Server whose discoverer uses the fake executor"""
    server = DiscoveryMCPServer(DatabaseConfig(url="postgresql://u:p@localhost/shop"))
    server.discoverer = PostgresDiscoverer(fake_executor)
    return server


class TestToolListing:
    """Registered tools."""

    def test_tool_names(self, server):
        names = [tool.name for tool in server.list_tools()]
        assert names == [
            "discover_model_definitions",
            "discover_model_properties",
            "discover_primary_keys",
            "discover_foreign_keys",
            "discover_exported_foreign_keys",
        ]

    def test_table_tools_require_table(self, server):
        for tool in server.list_tools()[1:]:
            assert tool.inputSchema["required"] == ["table"]


class TestToolCalls:
    """Tool dispatch and response shape."""

    async def test_model_definitions(self, server, fake_executor):
        result = await server.call_tool(
            "discover_model_definitions", {"owner": "public", "views": True}
        )

        assert isinstance(result[0], TextContent)
        payload = json.loads(result[0].text)
        assert [item["type"] for item in payload] == ["table", "table", "view"]
        assert fake_executor.queries[0].params == {"owner": "public"}

    async def test_table_argument_split_from_options(self, server, fake_executor):
        await server.call_tool(
            "discover_exported_foreign_keys", {"table": "customers", "owner": "public"}
        )

        query = fake_executor.queries[0]
        assert query.params == {"owner": "public", "table": "customers"}

    async def test_missing_table_reported_as_error(self, server, fake_executor):
        result = await server.call_tool("discover_primary_keys", {})

        payload = json.loads(result[0].text)
        assert payload["error"] == "InvalidArgument"
        assert fake_executor.queries == []

    async def test_unknown_tool(self, server):
        with pytest.raises(ValueError):
            await server.call_tool("drop_table", {})


class TestTruncation:
    """Response size limits."""

    def test_short_response_untouched(self):
        assert truncate_json_response('{"a": 1}', 100) == '{"a": 1}'

    def test_long_response_truncated(self):
        data = "x" * 1000
        result = truncate_json_response(data, 500)
        assert len(result) <= 500
        assert "Response truncated" in result

    def test_tiny_limit_returns_error_document(self):
        result = truncate_json_response("x" * 1000, 50)
        assert json.loads(result)["error"] == "Response too large"
