"""Upstream connectors."""

from baseql_mcp.connectors.graphql import (
    GraphQLConnector,
    GraphQLConnectorConfig,
    format_graphql_errors,
    normalize_api_key,
)

__all__ = [
    "GraphQLConnector",
    "GraphQLConnectorConfig",
    "format_graphql_errors",
    "normalize_api_key",
]
