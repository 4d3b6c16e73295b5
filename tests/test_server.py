"""Tests for the MCP server."""

import json

import pytest
from fastmcp.exceptions import ResourceError, ToolError
from starlette.testclient import TestClient

from baseql_mcp.errors import UpstreamError
from baseql_mcp.server import SERVER_NAME, _create_server
from baseql_mcp.service import SCHEMA_RESOURCE_URI, BaseQLService


def _get_tool_names(server):
    """Extract registered tool names from a FastMCP server."""
    return set(server._tool_manager._tools.keys())


def _tool(server, name):
    return server._tool_manager._tools[name].fn


@pytest.fixture
def server_with(settings, make_service):
    def _make(*responses):
        service, connector = make_service(*responses)
        return _create_server(settings, service), connector

    return _make


def test_mcp_server_created(settings):
    server = _create_server(settings)
    assert server.name == SERVER_NAME


def test_tools_registered(server_with):
    server, _ = server_with()
    assert _get_tool_names(server) == {
        "ping",
        "query",
        "getTableSchema",
        "listTables",
        "queryTable",
        "searchTable",
        "getFieldOptions",
    }


@pytest.mark.asyncio
async def test_schema_resource_registered(server_with):
    server, _ = server_with()
    resources = await server.get_resources()
    assert SCHEMA_RESOURCE_URI in resources


@pytest.mark.asyncio
async def test_ping(server_with):
    server, connector = server_with()
    result = await _tool(server, "ping")()
    assert result == {"status": "ok", "endpoint_configured": True, "transport": "stdio"}
    assert connector.calls == []


@pytest.mark.asyncio
async def test_query_table_tool(server_with):
    server, connector = server_with({"contacts": [{"id": "rec1"}]})
    result = await _tool(server, "queryTable")(
        tableName="contacts", filter={"type": "Student"}, limit=10, offset=25
    )
    assert result == {"contacts": [{"id": "rec1"}]}
    query, _ = connector.calls[0]
    assert 'contacts(_filter: {type: "Student"}, _page_size: 10, _page: 3)' in query


@pytest.mark.asyncio
async def test_list_tables_tool(server_with):
    types = [{"name": "contacts", "kind": "OBJECT", "description": None}]
    server, _ = server_with({"__schema": {"types": types}})
    result = await _tool(server, "listTables")()
    assert result == [{"name": "contacts", "description": "No description available"}]


@pytest.mark.asyncio
async def test_invalid_arguments_become_tool_errors(server_with):
    server, connector = server_with()
    with pytest.raises(ToolError, match="limit must be between 1 and 100"):
        await _tool(server, "queryTable")(tableName="contacts", limit=101)
    assert connector.calls == []


@pytest.mark.asyncio
async def test_upstream_errors_become_tool_errors(server_with):
    server, _ = server_with(UpstreamError("Unknown type Int"))
    with pytest.raises(ToolError, match="Failed to query table: Unknown type Int. BaseQL uses"):
        await _tool(server, "queryTable")(tableName="contacts")


@pytest.mark.asyncio
async def test_unconfigured_tool_error(unconfigured_settings):
    server = _create_server(unconfigured_settings, BaseQLService(unconfigured_settings))
    with pytest.raises(ToolError, match="BaseQL endpoint not configured"):
        await _tool(server, "listTables")()

    result = await _tool(server, "ping")()
    assert result["endpoint_configured"] is False


@pytest.mark.asyncio
async def test_schema_resource(server_with):
    payload = {"__schema": {"types": []}}
    server, _ = server_with(payload)
    resources = await server.get_resources()
    content = resources[SCHEMA_RESOURCE_URI].fn()
    assert json.loads(content) == payload


@pytest.mark.asyncio
async def test_schema_resource_error(server_with):
    server, _ = server_with(UpstreamError("boom"))
    resources = await server.get_resources()
    with pytest.raises(ResourceError, match="Failed to fetch schema: boom"):
        resources[SCHEMA_RESOURCE_URI].fn()


def test_health_route(server_with):
    server, _ = server_with()
    client = TestClient(server.http_app())
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "healthy",
        "service": SERVER_NAME,
        "endpoint_configured": True,
    }
