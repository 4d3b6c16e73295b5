"""Error kinds raised by baseql-mcp operations.

Every error carries the JSON-RPC error code the MCP layer reports for it.
Validation errors are raised before any network call; transport and GraphQL
failures are normalized into ``UpstreamError`` by the connector.
"""

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND

NOT_CONFIGURED_MESSAGE = (
    "BaseQL endpoint not configured. "
    "Please set BASEQL_API_ENDPOINT and BASEQL_API_KEY environment variables."
)


class BaseQLError(Exception):
    """Base class for all baseql-mcp errors."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(BaseQLError):
    """Malformed or out-of-range caller input."""

    code = INVALID_PARAMS


class NotFoundError(BaseQLError):
    """Unknown resource URI or nothing suitable to operate on."""

    code = INVALID_REQUEST


class MethodNotFoundError(BaseQLError):
    """Unrecognized operation name."""

    code = METHOD_NOT_FOUND

    def __init__(self, operation: str):
        super().__init__(f"Unknown tool: {operation}")
        self.operation = operation


class ConfigurationError(BaseQLError):
    """Endpoint or API key missing."""

    code = INVALID_REQUEST

    def __init__(self, message: str = NOT_CONFIGURED_MESSAGE):
        super().__init__(message)


class UpstreamError(BaseQLError):
    """Transport failure or GraphQL error returned by the BaseQL endpoint.

    Attributes:
        upstream_message: The message as reported by the upstream service.
        hint: Optional actionable hint appended to the message.
    """

    code = INTERNAL_ERROR

    def __init__(
        self,
        upstream_message: str,
        hint: str | None = None,
        status_code: int | None = None,
    ):
        self.upstream_message = upstream_message
        self.hint = hint
        self.status_code = status_code
        message = f"{upstream_message}. {hint}" if hint else upstream_message
        super().__init__(message)

    def with_prefix(self, prefix: str) -> "UpstreamError":
        """Copy of this error whose message starts with an operation-specific prefix."""
        return UpstreamError(f"{prefix}{self.upstream_message}", self.hint, self.status_code)

    def with_hint(self, hint: str | None) -> "UpstreamError":
        return UpstreamError(self.upstream_message, hint, self.status_code)
