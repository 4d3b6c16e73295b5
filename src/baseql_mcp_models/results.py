"""Response models returned to MCP clients."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary for JSON serialization."""
        return self.model_dump(by_alias=True)


class FieldDescriptor(_ResultModel):
    """Introspected metadata for one field of a table."""

    name: str
    type_name: str | None = None
    type_kind: str | None = None


class TableSummary(_ResultModel):
    name: str
    description: str = "No description available"


class ValueCount(_ResultModel):
    value: str
    count: int


class FieldOptions(_ResultModel):
    """Frequency table of the values observed in one field of a sample."""

    table_name: str
    field_name: str
    sample_size: int = Field(default=0, description="Records actually sampled")
    total_unique: int = 0
    null_count: int = 0
    values: list[ValueCount] = Field(default_factory=list)
    is_multi_select: bool = False
    note: str = ""


class SearchResult(_ResultModel):
    search_term: str
    fields_searched: list[str]
    primary_search_field: str
    limit: int
    note: str
    results: dict[str, Any] = Field(default_factory=dict)
