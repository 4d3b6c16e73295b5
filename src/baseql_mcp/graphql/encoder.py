"""Encode filters, sort specs and pagination into BaseQL query arguments.

BaseQL deviates from standard GraphQL in a few ways that matter here:

- filter and order objects are object literals with bare (unquoted) keys,
  e.g. ``_filter: {status: "Open"}``
- sort directions are lowercase strings: ``_order_by: {lastName: "asc"}``
- there is no offset, only ``_page_size`` (max 100) and a 1-based ``_page``

Offsets are therefore converted to the page containing them. The result is
only exact when the offset is a multiple of the page size.
"""

import json
import math
from collections.abc import Iterable, Mapping
from typing import Any

from baseql_mcp_models import GRAPHQL_NAME_RE, MAX_PAGE_SIZE, SortSpec

from baseql_mcp.errors import InvalidArgumentError

DEFAULT_PAGE_SIZE = MAX_PAGE_SIZE
SORT_DIRECTIONS = ("asc", "desc")

SortItem = SortSpec | Mapping[str, Any] | tuple[str, str | None]


def render_value(value: Any) -> str:
    """Render a Python value as a GraphQL input value literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidArgumentError(f"Filter values must be finite numbers, got {value}")
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Mapping):
        return render_object(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_value(item) for item in value) + "]"
    raise InvalidArgumentError(f"Unsupported filter value type: {type(value).__name__}")


def render_object(mapping: Mapping[str, Any], context: str = "filter") -> str:
    """Render a mapping as an object literal with unquoted keys.

    Raises:
        InvalidArgumentError: If a key is not a valid GraphQL name.
    """
    parts = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not GRAPHQL_NAME_RE.fullmatch(key):
            raise InvalidArgumentError(
                f"Invalid {context} key {key!r}: keys must be GraphQL names "
                "(letters, digits and underscores, not starting with a digit)"
            )
        parts.append(f"{key}: {render_value(value)}")
    return "{" + ", ".join(parts) + "}"


def encode_filter(filter: Mapping[str, Any] | None) -> str | None:
    """Encode an exact-match filter mapping as a ``_filter`` argument."""
    if not filter:
        return None
    return f"_filter: {render_object(filter)}"


def _sort_pair(item: SortItem) -> tuple[str, str]:
    if isinstance(item, SortSpec):
        field, direction = item.field, item.direction
    elif isinstance(item, Mapping):
        field, direction = item.get("field"), item.get("direction")
    else:
        field, direction = item
    return field, direction or "asc"


def encode_order_by(sort: Iterable[SortItem] | None) -> str | None:
    """Encode sort specs as an ``_order_by`` argument.

    A field that appears more than once keeps its first position and its
    last direction.
    """
    if not sort:
        return None

    order: dict[str, str] = {}
    for item in sort:
        field, direction = _sort_pair(item)
        if direction not in SORT_DIRECTIONS:
            raise InvalidArgumentError(
                f'Invalid sort direction "{direction}". Use "asc" or "desc" (lowercase)'
            )
        order[field] = direction

    if not order:
        return None
    return f"_order_by: {render_object(order, context='sort')}"


def page_for_offset(offset: int, page_size: int) -> int:
    """1-based page number containing ``offset``."""
    return offset // page_size + 1


def encode_pagination(limit: int | None = None, offset: int | None = None) -> list[str]:
    """Encode limit/offset as ``_page_size`` and ``_page`` arguments."""
    fragments = []
    if limit is not None:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidArgumentError("limit must be between 1 and 100 (BaseQL maximum)")
        fragments.append(f"_page_size: {limit}")
    if offset is not None:
        if offset < 0:
            raise InvalidArgumentError("offset must be 0 or positive")
        page_size = limit or DEFAULT_PAGE_SIZE
        fragments.append(f"_page: {page_for_offset(offset, page_size)}")
    return fragments


def encode_fragments(
    filter: Mapping[str, Any] | None = None,
    sort: Iterable[SortItem] | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[str]:
    """Encode all arguments, in order: filter, order-by, page size, page."""
    fragments = []
    filter_fragment = encode_filter(filter)
    if filter_fragment:
        fragments.append(filter_fragment)
    order_fragment = encode_order_by(sort)
    if order_fragment:
        fragments.append(order_fragment)
    fragments.extend(encode_pagination(limit, offset))
    return fragments


def encode_arguments(
    filter: Mapping[str, Any] | None = None,
    sort: Iterable[SortItem] | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> str:
    """Encode arguments as a parenthesized argument list, or ``""`` if empty.

    Example:
        >>> encode_arguments({"type": "Student"}, limit=10, offset=25)
        '(_filter: {type: "Student"}, _page_size: 10, _page: 3)'
    """
    fragments = encode_fragments(filter, sort, limit, offset)
    if not fragments:
        return ""
    return "(" + ", ".join(fragments) + ")"
