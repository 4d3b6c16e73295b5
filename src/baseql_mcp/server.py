"""FastMCP server for baseql-mcp."""

import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError
from pydantic import Field
from starlette.requests import Request
from starlette.responses import JSONResponse

from baseql_mcp.config import Settings, get_settings
from baseql_mcp.dispatcher import OperationDispatcher
from baseql_mcp.errors import BaseQLError
from baseql_mcp.service import SCHEMA_RESOURCE_URI, BaseQLService

logger = logging.getLogger(__name__)

SERVER_NAME = "baseql-mcp"

INSTRUCTIONS = """
Query Airtable and Google Sheets data through a BaseQL GraphQL endpoint.

## Workflow

1. listTables() to see which tables exist
2. getTableSchema(tableName=...) to see a table's fields and types
3. queryTable(...) for filtered, sorted, paginated reads
4. getFieldOptions(...) to discover the values used by select fields before filtering
5. query(...) for anything else (linked records, custom selections)

## BaseQL conventions

- Numbers are Float; there is no Int type
- Pagination is _page_size (max 100) and _page (1-based), not limit/offset
- Filter and order objects use unquoted keys: _filter: {status: "Open"}
- Sort directions are lowercase: _order_by: {lastName: "asc"}
- Filters are exact matches only; there is no OR
"""


def _create_server(
    settings: Settings | None = None,
    service: BaseQLService | None = None,
) -> FastMCP:
    """Create the MCP server and register the BaseQL tools and resources."""
    settings = settings or get_settings()
    service = service or BaseQLService(settings)
    dispatcher = OperationDispatcher(service)

    server = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS)

    async def _run(operation: str, arguments: dict[str, Any]) -> Any:
        try:
            return await dispatcher.dispatch(operation, arguments)
        except BaseQLError as exc:
            logger.warning(f"{operation} failed: {exc}")
            raise ToolError(str(exc)) from exc

    # =========================================================================
    # MCP Resources
    # =========================================================================

    @server.resource(
        SCHEMA_RESOURCE_URI,
        name="BaseQL Schema",
        description="GraphQL schema information from your BaseQL endpoint",
        mime_type="application/json",
    )
    def get_schema() -> str:
        try:
            return service.read_resource(SCHEMA_RESOURCE_URI)
        except BaseQLError as exc:
            raise ResourceError(str(exc)) from exc

    # Health check endpoint for the HTTP transport
    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "healthy",
                "service": SERVER_NAME,
                "endpoint_configured": service.is_configured,
            }
        )

    # =========================================================================
    # Tools
    # =========================================================================

    async def _ping() -> dict:
        """Health check - verify the server is running and configured."""
        return {
            "status": "ok",
            "endpoint_configured": service.is_configured,
            "transport": settings.mcp_transport,
        }

    async def _query(
        query: Annotated[
            str,
            Field(
                description=(
                    "GraphQL query string. Example: 'query { contacts(_page_size: 5, "
                    '_filter: {type: "Student"}) { id firstName email } }\'. '
                    "Use _order_by for sorting: '_order_by: {lastName: \"asc\"}'. "
                    "Access linked records: 'purchaser { id fullName }'."
                )
            ),
        ],
        variables: Annotated[
            dict[str, Any] | None,
            Field(description="GraphQL variables as key-value pairs (optional)"),
        ] = None,
    ) -> dict:
        """Execute a custom GraphQL query against the BaseQL endpoint.

        Use this for complex queries, linked records, or when other tools don't
        meet your needs. BaseQL uses Float (not Int) for numbers, _page_size/_page
        for pagination, and unquoted keys in filters like {email: "test@example.com"}.
        """
        return await _run("query", {"query": query, "variables": variables})

    async def _get_table_schema(
        tableName: Annotated[  # noqa: N803
            str,
            Field(description="Name of the table to examine (use listTables to see options)"),
        ],
    ) -> dict:
        """Get field names, types and relationships for one table.

        Use this before querying to find fields for filtering and sorting.
        Unknown tables return {"__type": null}.
        """
        return await _run("getTableSchema", {"tableName": tableName})

    async def _list_tables() -> list[dict]:
        """List all tables (data sources) available on the BaseQL endpoint.

        Use this first to discover what data is available, then getTableSchema
        to understand a specific table.
        """
        return await _run("listTables", {})

    async def _query_table(
        tableName: Annotated[str, Field(description="Table name to query")],  # noqa: N803
        fields: Annotated[
            list[str] | None,
            Field(description='Fields to return, e.g. ["id", "firstName", "email"]'),
        ] = None,
        filter: Annotated[
            dict[str, Any] | None,
            Field(
                description=(
                    'Exact-match filter, e.g. {"type": "Student"}. '
                    'Filter linked records by ID: {"purchaser": ["rec123xyz"]}.'
                )
            ),
        ] = None,
        sort: Annotated[
            list[dict[str, Any]] | None,
            Field(
                description=(
                    'Sort options, e.g. [{"field": "lastName", "direction": "asc"}]. '
                    'Direction must be lowercase "asc" or "desc".'
                )
            ),
        ] = None,
        limit: Annotated[
            int | None, Field(description="Maximum records to return (1-100)")
        ] = None,
        offset: Annotated[
            int | None,
            Field(
                description=(
                    "Records to skip. Converted to the page containing the offset, "
                    "so it is exact only on multiples of limit."
                )
            ),
        ] = None,
    ) -> dict:
        """Query a table with exact-match filtering, sorting, and pagination.

        Use this for most data retrieval. For partial text lookups use searchTable.
        """
        return await _run(
            "queryTable",
            {
                "tableName": tableName,
                "fields": fields,
                "filter": filter,
                "sort": sort,
                "limit": limit,
                "offset": offset,
            },
        )

    async def _search_table(
        tableName: Annotated[str, Field(description="The table to search")],  # noqa: N803
        searchTerm: Annotated[str, Field(description="The value to look for")],  # noqa: N803
        fields: Annotated[
            list[str] | None,
            Field(
                description=(
                    "String fields to search. Defaults to common text fields: "
                    "firstName, lastName, fullName, email, name, title"
                )
            ),
        ] = None,
        limit: Annotated[
            int | None, Field(description="Maximum results to return (default 10, max 100)")
        ] = None,
    ) -> dict:
        """Find records whose text field equals the search term.

        BaseQL has no full-text search and no OR, so only the first matching
        String field is filtered on. For multi-field exact matches use queryTable.
        """
        return await _run(
            "searchTable",
            {"tableName": tableName, "searchTerm": searchTerm, "fields": fields, "limit": limit},
        )

    async def _get_field_options(
        tableName: Annotated[str, Field(description="Table containing the field")],  # noqa: N803
        fieldName: Annotated[  # noqa: N803
            str,
            Field(description="Field to analyze, typically a select field like 'status'"),
        ],
        sampleSize: Annotated[  # noqa: N803
            int | None, Field(description="Records to sample (default 100, max 100)")
        ] = None,
    ) -> dict:
        """Discover the values used by a select field by sampling records.

        Returns unique values with counts. Options not used by any sampled
        record will not appear.
        """
        return await _run(
            "getFieldOptions",
            {"tableName": tableName, "fieldName": fieldName, "sampleSize": sampleSize},
        )

    server.tool(name="ping")(_ping)
    server.tool(name="query")(_query)
    server.tool(name="getTableSchema")(_get_table_schema)
    server.tool(name="listTables")(_list_tables)
    server.tool(name="queryTable")(_query_table)
    server.tool(name="searchTable")(_search_table)
    server.tool(name="getFieldOptions")(_get_field_options)

    return server


# Create the server instance
mcp = _create_server()


def _configure_logging(settings: Settings) -> None:
    """Configure logging before anything else.

    Logs go to stderr; stdout carries the stdio transport.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _configure_observability(settings: Settings) -> None:
    """Enable Logfire instrumentation when a token is configured."""
    if not settings.logfire_token:
        return
    try:
        import logfire
    except ImportError:
        logger.warning(
            "LOGFIRE_TOKEN is set but logfire is not installed; "
            "install baseql-mcp[observability] to enable it"
        )
        return

    logfire.configure(token=settings.logfire_token, service_name=SERVER_NAME)
    logfire.instrument_mcp()
    logger.info("Logfire observability enabled")


def main():
    """Run the MCP server."""
    settings = get_settings()
    _configure_logging(settings)
    _configure_observability(settings)

    if not settings.is_configured:
        logger.warning("BASEQL_API_ENDPOINT / BASEQL_API_KEY not set; tools will report an error")

    logger.info(f"Starting {SERVER_NAME} ({settings.mcp_transport} transport)")

    if settings.mcp_transport == "http":
        mcp.run(
            transport="http",
            host=settings.mcp_host,
            port=settings.mcp_port,
            path=settings.mcp_path,
        )
    else:
        # Default: stdio for local clients like Claude Desktop
        mcp.run()


if __name__ == "__main__":
    main()
