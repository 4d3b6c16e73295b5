"""Assemble BaseQL query documents.

Table and field names are structural parts of the document and are embedded
as-is. Callers must run them through ``validate_identifier`` first.
"""

from collections.abc import Iterable, Sequence

from baseql_mcp_models import GRAPHQL_NAME_RE

from baseql_mcp.errors import InvalidArgumentError

DEFAULT_SELECTION = ("id", "__typename")


def validate_identifier(name: str, kind: str = "field") -> str:
    """Check that ``name`` is a GraphQL name and return it.

    Raises:
        InvalidArgumentError: If the name could alter the document structure.
    """
    if not isinstance(name, str) or not GRAPHQL_NAME_RE.fullmatch(name):
        raise InvalidArgumentError(
            f"Invalid {kind} name {name!r}: use letters, digits and underscores only "
            "(use listTables / getTableSchema to see valid names)"
        )
    return name


def validate_identifiers(names: Iterable[str], kind: str = "field") -> list[str]:
    return [validate_identifier(name, kind) for name in names]


def build_query(
    table_name: str,
    arguments: str = "",
    fields: Sequence[str] | None = None,
    operation_name: str = "QueryTable",
) -> str:
    """Build a complete query document selecting ``fields`` from ``table_name``.

    Args:
        table_name: Root query field (the table collection).
        arguments: Encoded argument list from ``encode_arguments``, or "".
        fields: Fields to select. Defaults to ``id`` and ``__typename``.
        operation_name: Name of the query operation.

    Returns:
        The query document text.
    """
    selection = list(fields) if fields else list(DEFAULT_SELECTION)
    body = "\n".join(f"    {field}" for field in selection)
    return f"query {operation_name} {{\n  {table_name}{arguments} {{\n{body}\n  }}\n}}"
