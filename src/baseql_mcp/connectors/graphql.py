"""GraphQL connector: issues queries against a BaseQL endpoint over HTTP."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import requests

from baseql_mcp.errors import ConfigurationError, UpstreamError
from baseql_mcp.graphql.introspection import CONNECTION_TEST_QUERY

if TYPE_CHECKING:
    from baseql_mcp.config import Settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GraphQLConnectorConfig:
    """Endpoint and credentials for a BaseQL GraphQL endpoint."""

    endpoint: str = ""
    api_key: str = ""
    timeout: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> GraphQLConnectorConfig:
        return cls(
            endpoint=settings.baseql_api_endpoint,
            api_key=settings.baseql_api_key,
            timeout=settings.request_timeout,
        )


def normalize_api_key(api_key: str) -> str:
    """Return an Authorization header value, adding ``Bearer `` if absent."""
    api_key = api_key.strip()
    if api_key.startswith(BEARER_PREFIX):
        return api_key
    return f"{BEARER_PREFIX}{api_key}"


def format_graphql_errors(errors: list[Any]) -> str:
    """Join the messages of a GraphQL ``errors`` list."""
    messages = []
    for error in errors:
        if isinstance(error, dict):
            messages.append(str(error.get("message") or error))
        else:
            messages.append(str(error))
    return "; ".join(messages)


# ---------------------------------------------------------------------------
# Connector
# ---------------------------------------------------------------------------


class GraphQLConnector:
    """Stateless client for one BaseQL endpoint.

    Headers are fixed at construction, so a single instance can be shared by
    concurrent requests. Every failure (network, HTTP status, GraphQL errors,
    malformed body) is raised as ``UpstreamError``.
    """

    def __init__(self, config: GraphQLConnectorConfig) -> None:
        if not config.endpoint or not config.api_key:
            raise ConfigurationError()
        self.config = config
        self._headers = {
            "Authorization": normalize_api_key(config.api_key),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> GraphQLConnector:
        return cls(GraphQLConnectorConfig.from_settings(settings))

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    # -- Execution ----------------------------------------------------------

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL document and return its ``data`` payload.

        Args:
            query: GraphQL document text.
            variables: Optional GraphQL variables.

        Returns:
            The ``data`` object of the response ({} when absent).

        Raises:
            UpstreamError: On transport failure, HTTP error status, GraphQL
                errors or an unparseable response body.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            resp = requests.post(
                self.config.endpoint,
                json=payload,
                headers=self._headers,
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            logger.warning(f"BaseQL request failed: {exc}")
            raise UpstreamError(str(exc)) from exc

        try:
            body = resp.json()
        except ValueError as exc:
            self._raise_for_status(resp)
            raise UpstreamError(
                "Invalid JSON response from BaseQL endpoint", status_code=resp.status_code
            ) from exc

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            message = format_graphql_errors(errors)
            logger.warning(f"BaseQL returned GraphQL errors: {message}")
            raise UpstreamError(message, status_code=resp.status_code)

        self._raise_for_status(resp)

        if not isinstance(body, dict):
            raise UpstreamError("Unexpected response from BaseQL endpoint: expected an object")
        return body.get("data") or {}

    @staticmethod
    def _raise_for_status(resp: requests.Response) -> None:
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise UpstreamError(str(exc), status_code=resp.status_code) from exc

    # -- Test connection ----------------------------------------------------

    def test_connection(self) -> dict[str, Any]:
        """Run a minimal introspection query to verify endpoint and key."""
        try:
            data = self.execute(CONNECTION_TEST_QUERY)
            query_type = (data.get("__schema") or {}).get("queryType") or {}
            return {
                "connected": True,
                "endpoint": self.config.endpoint,
                "query_type": query_type.get("name"),
                "error": None,
            }
        except UpstreamError as exc:
            return {
                "connected": False,
                "endpoint": self.config.endpoint,
                "query_type": None,
                "error": str(exc),
            }
