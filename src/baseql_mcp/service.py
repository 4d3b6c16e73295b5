"""BaseQL operations: translate validated requests into GraphQL and back.

``BaseQLService`` owns the GraphQL connector for the lifetime of the process.
Each public method takes an already-validated request model, performs at most
a couple of upstream calls, and returns a JSON-serializable result.
"""

import json
import logging
from typing import Any

from baseql_mcp_models import (
    GetFieldOptionsRequest,
    GetTableSchemaRequest,
    ListTablesRequest,
    QueryTableRequest,
    RawQueryRequest,
    SearchResult,
    SearchTableRequest,
)

from baseql_mcp.config import Settings, get_settings
from baseql_mcp.connectors.graphql import GraphQLConnector
from baseql_mcp.errors import (
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamError,
)
from baseql_mcp.graphql.builder import build_query, validate_identifier, validate_identifiers
from baseql_mcp.graphql.encoder import encode_arguments
from baseql_mcp.graphql.introspection import (
    LIST_TABLES_QUERY,
    SCHEMA_QUERY,
    TABLE_SCHEMA_QUERY,
    filter_table_types,
    parse_field_descriptors,
    searchable_fields,
)
from baseql_mcp.sampling import aggregate_field_values

logger = logging.getLogger(__name__)

SCHEMA_RESOURCE_URI = "baseql://schema"

# Search result selection is capped to keep documents short
MAX_SEARCH_RESULT_FIELDS = 10

# Known upstream error substrings and how to fix them
QUERY_ERROR_HINTS = (
    ("Unknown type Int", "BaseQL uses Float instead of Int for numbers."),
    (
        "Unknown argument",
        "BaseQL uses _filter, _page_size, _page, _order_by instead of standard GraphQL arguments.",
    ),
    (
        "Cannot query field",
        "Field may not exist - use getTableSchema to see available fields.",
    ),
)


def hint_for_error(message: str) -> str | None:
    """Return an actionable hint for a known upstream error, if any."""
    for needle, hint in QUERY_ERROR_HINTS:
        if needle in message:
            return hint
    return None


class BaseQLService:
    """Long-lived service exposing the BaseQL operations.

    If the endpoint or API key is missing the connector is never created and
    every operation raises ``ConfigurationError``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        connector: GraphQLConnector | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._connector = connector
        self._config_error: ConfigurationError | None = None

        if self._connector is None:
            try:
                self._connector = GraphQLConnector.from_settings(self.settings)
            except ConfigurationError as exc:
                logger.warning(f"BaseQL connector not initialized: {exc}")
                self._config_error = exc

    @property
    def is_configured(self) -> bool:
        return self._connector is not None

    @property
    def connector(self) -> GraphQLConnector:
        self.require_configured()
        return self._connector

    def require_configured(self) -> None:
        """Raise ``ConfigurationError`` if no connector is available."""
        if self._connector is None:
            raise self._config_error or ConfigurationError()

    def _execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        error_prefix: str,
    ) -> dict[str, Any]:
        connector = self.connector
        try:
            return connector.execute(query, variables)
        except UpstreamError as exc:
            raise exc.with_prefix(error_prefix) from exc

    # =========================================================================
    # Operations
    # =========================================================================

    def raw_query(self, request: RawQueryRequest) -> dict[str, Any]:
        """Forward a GraphQL document verbatim."""
        return self._execute(
            request.query, request.variables, error_prefix="GraphQL query failed: "
        )

    def list_tables(self, request: ListTablesRequest | None = None) -> list[dict[str, Any]]:
        """List object types that represent tables."""
        data = self._execute(LIST_TABLES_QUERY, error_prefix="Failed to list tables: ")
        types = (data.get("__schema") or {}).get("types") or []
        tables = filter_table_types(types)
        logger.debug(f"listTables: {len(tables)} tables out of {len(types)} types")
        return [table.to_dict() for table in tables]

    def get_table_schema(self, request: GetTableSchemaRequest) -> dict[str, Any]:
        """Introspect one table. Unknown tables yield ``{"__type": None}``."""
        data = self._execute(
            TABLE_SCHEMA_QUERY,
            {"name": request.table_name},
            error_prefix="Failed to get table schema: ",
        )
        return {"__type": data.get("__type")}

    def query_table(self, request: QueryTableRequest) -> dict[str, Any]:
        """Query a table with exact-match filter, sort and page-based pagination."""
        table_name = validate_identifier(request.table_name, "table")
        fields = validate_identifiers(request.fields or [])
        arguments = encode_arguments(
            filter=request.filter,
            sort=request.sort,
            limit=request.limit,
            offset=request.offset,
        )
        query = build_query(table_name, arguments, fields, operation_name="QueryTable")
        logger.debug(f"queryTable document:\n{query}")

        try:
            return self._execute(query, error_prefix="Failed to query table: ")
        except UpstreamError as exc:
            hint = hint_for_error(exc.upstream_message)
            if hint is None:
                raise
            raise exc.with_hint(hint) from exc

    def search_table(self, request: SearchTableRequest) -> dict[str, Any]:
        """Search a table by exact match on its first searchable text field.

        BaseQL filters have no OR, so only the first String field among the
        candidates is filtered on; the others are returned for context.
        """
        table_name = validate_identifier(request.table_name, "table")
        candidates = validate_identifiers(request.fields or [])

        schema = self._execute(
            TABLE_SCHEMA_QUERY,
            {"name": table_name},
            error_prefix="Failed to search table: ",
        )
        descriptors = parse_field_descriptors(schema.get("__type"))
        fields_to_search = searchable_fields(descriptors, candidates)
        if not fields_to_search:
            raise InvalidArgumentError(
                f'No searchable text fields found in table "{table_name}". '
                "Please specify valid string fields to search."
            )

        search_field = fields_to_search[0]
        arguments = encode_arguments(
            filter={search_field: request.search_term}, limit=request.limit
        )
        selection = list(dict.fromkeys(["id", *fields_to_search[:MAX_SEARCH_RESULT_FIELDS]]))
        query = build_query(table_name, arguments, selection, operation_name="SearchTable")
        logger.debug(f"searchTable document:\n{query}")

        data = self._execute(query, error_prefix="Failed to search table: ")
        result = SearchResult(
            search_term=request.search_term,
            fields_searched=fields_to_search,
            primary_search_field=search_field,
            limit=request.limit,
            note=(
                f'Searched for "{request.search_term}" in {", ".join(fields_to_search)}. '
                f'BaseQL limitations: exact matches only, searched primary field "{search_field}".'
            ),
            results=data,
        )
        return result.to_dict()

    def get_field_options(self, request: GetFieldOptionsRequest) -> dict[str, Any]:
        """Sample a table and count the values used in one field."""
        table_name = validate_identifier(request.table_name, "table")
        field_name = validate_identifier(request.field_name)
        arguments = encode_arguments(limit=request.sample_size)
        query = build_query(table_name, arguments, [field_name], operation_name="GetFieldOptions")
        logger.debug(f"getFieldOptions document:\n{query}")

        data = self._execute(query, error_prefix="Failed to get field options: ")
        records = data.get(table_name)
        if isinstance(records, dict):
            records = [records]
        elif not isinstance(records, list):
            records = []

        options = aggregate_field_values(records, field_name, table_name)
        return options.to_dict()

    # =========================================================================
    # Resources
    # =========================================================================

    def read_schema(self) -> str:
        """Full introspection payload as indented JSON."""
        data = self._execute(SCHEMA_QUERY, error_prefix="Failed to fetch schema: ")
        return json.dumps(data, indent=2)

    def read_resource(self, uri: str) -> str:
        if uri == SCHEMA_RESOURCE_URI:
            return self.read_schema()
        raise NotFoundError(f"Unknown resource: {uri}")
