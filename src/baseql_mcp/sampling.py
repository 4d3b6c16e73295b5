"""Infer the options of a select field from a sample of records."""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from baseql_mcp_models import FieldOptions, ValueCount

EMPTY_TABLE_NOTE = "No records found in table"
SAMPLE_NOTE = (
    "Values discovered from existing data. "
    "Some options may not appear if they are not currently used in any records."
)


def stringify_value(value: Any) -> str:
    """String form of a field value, matching how it reads in JSON output."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        # BaseQL numbers are Floats; 3.0 and 3 are the same option
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return str(value)


def aggregate_field_values(
    records: Iterable[Mapping[str, Any]] | None,
    field_name: str,
    table_name: str = "",
) -> FieldOptions:
    """Count the values of ``field_name`` across ``records``.

    Null or absent values are counted separately. Array values (multi-select
    and linked-record fields) contribute one count per element and mark the
    field as multi-select. Values are ordered by count, descending; ties keep
    the order in which values were first seen.
    """
    records = list(records or [])
    if not records:
        return FieldOptions(
            table_name=table_name,
            field_name=field_name,
            note=EMPTY_TABLE_NOTE,
        )

    counts: dict[str, int] = {}
    null_count = 0
    is_multi_select = False

    for record in records:
        value = record.get(field_name) if record else None
        if value is None:
            null_count += 1
        elif isinstance(value, list):
            is_multi_select = True
            for item in value:
                if item is None:
                    continue
                key = stringify_value(item)
                counts[key] = counts.get(key, 0) + 1
        else:
            key = stringify_value(value)
            counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)

    return FieldOptions(
        table_name=table_name,
        field_name=field_name,
        sample_size=len(records),
        total_unique=len(ranked),
        null_count=null_count,
        values=[ValueCount(value=value, count=count) for value, count in ranked],
        is_multi_select=is_multi_select,
        note=SAMPLE_NOTE,
    )
