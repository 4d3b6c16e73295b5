"""Shared fixtures for baseql-mcp tests."""

import pytest

from baseql_mcp.config import Settings, reset_settings
from baseql_mcp.service import BaseQLService

ENDPOINT = "https://api.baseql.com/airtable/graphql/appTEST"


class FakeConnector:
    """Stands in for GraphQLConnector and records every document it is sent.

    ``responses`` is consumed in order; an exception instance is raised
    instead of returned.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def execute(self, query, variables=None):
        self.calls.append((query, variables))
        if not self.responses:
            return {}
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and .env file."""
    for name in (
        "BASEQL_API_ENDPOINT",
        "BASEQL_API_KEY",
        "REQUEST_TIMEOUT",
        "MCP_TRANSPORT",
        "LOG_LEVEL",
        "LOGFIRE_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    return Settings(baseql_api_endpoint=ENDPOINT, baseql_api_key="key123")


@pytest.fixture
def unconfigured_settings():
    return Settings()


@pytest.fixture
def make_service(settings):
    def _make(*responses):
        connector = FakeConnector(*responses)
        return BaseQLService(settings, connector=connector), connector

    return _make
