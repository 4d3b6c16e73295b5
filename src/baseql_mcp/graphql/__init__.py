"""Translation from tool-shaped requests to BaseQL GraphQL documents."""

from baseql_mcp.graphql.builder import (
    DEFAULT_SELECTION,
    build_query,
    validate_identifier,
    validate_identifiers,
)
from baseql_mcp.graphql.encoder import (
    DEFAULT_PAGE_SIZE,
    encode_arguments,
    encode_filter,
    encode_fragments,
    encode_order_by,
    encode_pagination,
    page_for_offset,
    render_object,
    render_value,
)
from baseql_mcp.graphql.introspection import (
    CONNECTION_TEST_QUERY,
    DEFAULT_SEARCH_FIELDS,
    LIST_TABLES_QUERY,
    SCHEMA_QUERY,
    TABLE_SCHEMA_QUERY,
    filter_table_types,
    parse_field_descriptors,
    searchable_fields,
)

__all__ = [
    "CONNECTION_TEST_QUERY",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SEARCH_FIELDS",
    "DEFAULT_SELECTION",
    "LIST_TABLES_QUERY",
    "SCHEMA_QUERY",
    "TABLE_SCHEMA_QUERY",
    "build_query",
    "encode_arguments",
    "encode_filter",
    "encode_fragments",
    "encode_order_by",
    "encode_pagination",
    "filter_table_types",
    "page_for_offset",
    "parse_field_descriptors",
    "render_object",
    "render_value",
    "searchable_fields",
    "validate_identifier",
    "validate_identifiers",
]
