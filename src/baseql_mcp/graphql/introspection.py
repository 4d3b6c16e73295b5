"""Introspection queries and helpers for reading a BaseQL schema."""

from collections.abc import Iterable, Sequence
from typing import Any

from baseql_mcp_models import FieldDescriptor, TableSummary

# Full schema, exposed as the baseql://schema resource
SCHEMA_QUERY = """
query IntrospectionQuery {
  __schema {
    types {
      name
      kind
      description
      fields {
        name
        type {
          name
          kind
        }
      }
    }
  }
}
"""

LIST_TABLES_QUERY = """
query ListTables {
  __schema {
    types {
      name
      kind
      description
    }
  }
}
"""

TABLE_SCHEMA_QUERY = """
query GetTableSchema($name: String!) {
  __type(name: $name) {
    name
    description
    fields {
      name
      description
      type {
        name
        kind
        ofType {
          name
          kind
        }
      }
    }
  }
}
"""

CONNECTION_TEST_QUERY = "{ __schema { queryType { name } } }"

ROOT_TYPES = frozenset({"Query", "Mutation", "Subscription"})

# Text fields commonly present in Airtable / Sheets bases
DEFAULT_SEARCH_FIELDS = ("firstName", "lastName", "fullName", "email", "name", "title")


def is_table_type(type_info: dict[str, Any]) -> bool:
    """True for object types that represent tables (not meta or root types)."""
    name = type_info.get("name") or ""
    return (
        type_info.get("kind") == "OBJECT"
        and not name.startswith("__")
        and name not in ROOT_TYPES
    )


def filter_table_types(types: Iterable[dict[str, Any]]) -> list[TableSummary]:
    """Reduce ``__schema.types`` to the list of tables."""
    return [
        TableSummary(
            name=t["name"],
            description=t.get("description") or "No description available",
        )
        for t in types
        if is_table_type(t)
    ]


def _named_type(type_ref: dict[str, Any] | None) -> dict[str, Any]:
    """Unwrap a NON_NULL wrapper so ``String!`` reads as the String scalar."""
    if not type_ref:
        return {}
    if type_ref.get("kind") == "NON_NULL" and type_ref.get("ofType"):
        return type_ref["ofType"]
    return type_ref


def parse_field_descriptors(type_payload: dict[str, Any] | None) -> list[FieldDescriptor]:
    """Parse the ``__type`` payload of a table into field descriptors.

    Returns an empty list for unknown types (``__type`` is null).
    """
    if not type_payload:
        return []
    descriptors = []
    for field in type_payload.get("fields") or []:
        named = _named_type(field.get("type"))
        descriptors.append(
            FieldDescriptor(
                name=field["name"],
                type_name=named.get("name"),
                type_kind=named.get("kind"),
            )
        )
    return descriptors


def is_string_scalar(descriptor: FieldDescriptor) -> bool:
    return descriptor.type_kind == "SCALAR" and descriptor.type_name == "String"


def searchable_fields(
    descriptors: Sequence[FieldDescriptor],
    candidates: Sequence[str] | None = None,
) -> list[str]:
    """Narrow candidate field names to those that are String scalars in the table.

    Args:
        descriptors: The table's introspected fields.
        candidates: Fields requested by the caller. Falls back to
            ``DEFAULT_SEARCH_FIELDS`` when empty or None.

    Returns:
        Candidates that exist as String scalars, in candidate order. Callers
        must treat an empty result as "nothing searchable".
    """
    string_fields = {d.name for d in descriptors if is_string_scalar(d)}
    wanted = candidates if candidates else DEFAULT_SEARCH_FIELDS
    return [name for name in wanted if name in string_fields]
