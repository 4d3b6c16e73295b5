"""Shared Pydantic models for baseql-mcp."""

from baseql_mcp_models.operations import (
    GRAPHQL_NAME_PATTERN,
    GRAPHQL_NAME_RE,
    MAX_PAGE_SIZE,
    GetFieldOptionsRequest,
    GetTableSchemaRequest,
    GraphQLName,
    ListTablesRequest,
    OperationRequest,
    QueryTableRequest,
    RawQueryRequest,
    SearchTableRequest,
    SortSpec,
)
from baseql_mcp_models.results import (
    FieldDescriptor,
    FieldOptions,
    SearchResult,
    TableSummary,
    ValueCount,
)

__version__ = "1.0.0"

__all__ = [
    # Operations
    "GRAPHQL_NAME_PATTERN",
    "GRAPHQL_NAME_RE",
    "MAX_PAGE_SIZE",
    "GetFieldOptionsRequest",
    "GetTableSchemaRequest",
    "GraphQLName",
    "ListTablesRequest",
    "OperationRequest",
    "QueryTableRequest",
    "RawQueryRequest",
    "SearchTableRequest",
    "SortSpec",
    # Results
    "FieldDescriptor",
    "FieldOptions",
    "SearchResult",
    "TableSummary",
    "ValueCount",
]
