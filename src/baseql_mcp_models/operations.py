"""Request models for the operations exposed to MCP clients.

Each operation has its own request model. ``OperationRequest`` is the
discriminated union of all of them, keyed by ``operation``, so a dispatcher
can validate raw tool arguments into a precisely typed request in one step.
"""

import re
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

# GraphQL Name production: letters, digits and underscores, no leading digit
GRAPHQL_NAME_PATTERN = r"^[_A-Za-z][_0-9A-Za-z]*$"
GRAPHQL_NAME_RE = re.compile(GRAPHQL_NAME_PATTERN)

# BaseQL hard cap on _page_size
MAX_PAGE_SIZE = 100


GraphQLName = Annotated[str, StringConstraints(pattern=GRAPHQL_NAME_PATTERN)]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class SortSpec(_RequestModel):
    """One sort key: field name plus lowercase direction."""

    field: GraphQLName = Field(..., description="Field to sort by")
    direction: str = Field(default="asc", description='Sort direction: "asc" or "desc"')

    @field_validator("direction", mode="before")
    @classmethod
    def check_direction(cls, value: Any) -> str:
        if value is None:
            return "asc"
        if value not in ("asc", "desc"):
            raise ValueError(f'Invalid sort direction "{value}". Use "asc" or "desc" (lowercase)')
        return value


class RawQueryRequest(_RequestModel):
    """Raw GraphQL passthrough."""

    operation: Literal["query"] = "query"
    query: str = Field(..., min_length=1, description="GraphQL query document")
    variables: dict[str, Any] | None = Field(default=None, description="GraphQL variables")


class ListTablesRequest(_RequestModel):
    operation: Literal["listTables"] = "listTables"


class GetTableSchemaRequest(_RequestModel):
    operation: Literal["getTableSchema"] = "getTableSchema"
    table_name: str = Field(..., min_length=1, description="Table (GraphQL type) name")


class QueryTableRequest(_RequestModel):
    """Generic table query: projection, exact-match filter, sort and pagination."""

    operation: Literal["queryTable"] = "queryTable"
    table_name: GraphQLName
    fields: list[GraphQLName] | None = None
    filter: dict[str, Any] | None = None
    sort: list[SortSpec] | None = None
    limit: int | None = None
    offset: int | None = None

    @field_validator("limit")
    @classmethod
    def check_limit(cls, value: int | None) -> int | None:
        if value is not None and not 1 <= value <= MAX_PAGE_SIZE:
            raise ValueError("limit must be between 1 and 100 (BaseQL maximum)")
        return value

    @field_validator("offset")
    @classmethod
    def check_offset(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("offset must be 0 or positive")
        return value


class SearchTableRequest(_RequestModel):
    operation: Literal["searchTable"] = "searchTable"
    table_name: GraphQLName
    search_term: str
    fields: list[GraphQLName] | None = None
    limit: int = 10

    @field_validator("limit")
    @classmethod
    def check_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("limit must be 1 or greater")
        # Upstream caps page size; larger requests are clamped rather than rejected
        return min(value, MAX_PAGE_SIZE)


class GetFieldOptionsRequest(_RequestModel):
    operation: Literal["getFieldOptions"] = "getFieldOptions"
    table_name: GraphQLName
    field_name: GraphQLName
    sample_size: int = MAX_PAGE_SIZE

    @field_validator("sample_size")
    @classmethod
    def check_sample_size(cls, value: int) -> int:
        if not 1 <= value <= MAX_PAGE_SIZE:
            raise ValueError("sampleSize must be between 1 and 100 (BaseQL maximum)")
        return value


OperationRequest = Annotated[
    Union[
        RawQueryRequest,
        ListTablesRequest,
        GetTableSchemaRequest,
        QueryTableRequest,
        SearchTableRequest,
        GetFieldOptionsRequest,
    ],
    Field(discriminator="operation"),
]
