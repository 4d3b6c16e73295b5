"""Route operation names to BaseQL service methods."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from baseql_mcp_models import OperationRequest
from pydantic import TypeAdapter, ValidationError

from baseql_mcp.errors import InvalidArgumentError, MethodNotFoundError
from baseql_mcp.service import BaseQLService

logger = logging.getLogger(__name__)

_REQUEST_ADAPTER: TypeAdapter[OperationRequest] = TypeAdapter(OperationRequest)

# Friendlier wording for the pydantic error types callers hit most
_ERROR_MESSAGES = {
    "missing": "is required",
    "extra_forbidden": "is not a recognized argument",
    "string_pattern_mismatch": (
        "must be a valid name (letters, digits and underscores, not starting with a digit)"
    ),
}


def format_validation_error(operation: str, exc: ValidationError) -> str:
    """Render a pydantic ValidationError as one readable line per problem."""
    problems = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        # Discriminated unions prefix the location with the tag
        if loc and loc[0] == operation:
            loc = loc[1:]
        message = _ERROR_MESSAGES.get(error["type"], error["msg"])
        message = message.removeprefix("Value error, ")
        where = ".".join(loc)
        problems.append(f"{where}: {message}" if where else message)
    return f"Invalid arguments for {operation}: " + "; ".join(problems)


class OperationDispatcher:
    """Validate raw tool arguments and dispatch them to the service.

    Order of checks for every call:
    1. unknown operation -> ``MethodNotFoundError``
    2. missing endpoint/key -> ``ConfigurationError``
    3. invalid arguments -> ``InvalidArgumentError`` (no network call)
    """

    def __init__(self, service: BaseQLService) -> None:
        self.service = service
        self._handlers: dict[str, Callable[[Any], Any]] = {
            "query": service.raw_query,
            "getTableSchema": service.get_table_schema,
            "listTables": service.list_tables,
            "queryTable": service.query_table,
            "searchTable": service.search_table,
            "getFieldOptions": service.get_field_options,
        }

    @property
    def operations(self) -> list[str]:
        return list(self._handlers)

    def parse_request(
        self, operation: str, arguments: Mapping[str, Any] | None = None
    ) -> OperationRequest:
        """Validate ``arguments`` into the request model for ``operation``."""
        if operation not in self._handlers:
            raise MethodNotFoundError(operation)

        payload = {k: v for k, v in (arguments or {}).items() if v is not None}
        payload["operation"] = operation
        try:
            return _REQUEST_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            raise InvalidArgumentError(format_validation_error(operation, exc)) from exc

    def call(self, operation: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Synchronously validate and execute one operation."""
        if operation not in self._handlers:
            raise MethodNotFoundError(operation)
        self.service.require_configured()
        request = self.parse_request(operation, arguments)
        logger.debug(f"Dispatching {operation}")
        return self._handlers[operation](request)

    async def dispatch(self, operation: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Validate and execute one operation without blocking the event loop."""
        return await asyncio.to_thread(self.call, operation, arguments)
