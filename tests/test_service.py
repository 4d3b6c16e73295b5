"""Tests for BaseQL operations."""

import json

import pytest

from baseql_mcp.errors import (
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    UpstreamError,
)
from baseql_mcp.service import SCHEMA_RESOURCE_URI, BaseQLService, hint_for_error
from baseql_mcp_models import (
    GetFieldOptionsRequest,
    GetTableSchemaRequest,
    QueryTableRequest,
    RawQueryRequest,
    SearchTableRequest,
)

CONTACTS_SCHEMA = {
    "__type": {
        "name": "contacts",
        "fields": [
            {"name": "id", "type": {"name": "String", "kind": "SCALAR"}},
            {"name": "firstName", "type": {"name": "String", "kind": "SCALAR"}},
            {"name": "email", "type": {"name": "String", "kind": "SCALAR"}},
            {"name": "age", "type": {"name": "Float", "kind": "SCALAR"}},
        ],
    }
}


class TestRawQuery:
    def test_passthrough(self, make_service):
        service, connector = make_service({"contacts": []})
        request = RawQueryRequest(query="{ contacts { id } }", variables={"n": 1})
        assert service.raw_query(request) == {"contacts": []}
        assert connector.calls == [("{ contacts { id } }", {"n": 1})]

    def test_error_prefix(self, make_service):
        service, _ = make_service(UpstreamError("Syntax Error"))
        with pytest.raises(UpstreamError, match="^GraphQL query failed: Syntax Error$"):
            service.raw_query(RawQueryRequest(query="{"))


class TestListTables:
    def test_filters_types(self, make_service):
        types = [
            {"name": "Query", "kind": "OBJECT"},
            {"name": "__Type", "kind": "OBJECT"},
            {"name": "contacts", "kind": "OBJECT", "description": "People"},
            {"name": "Float", "kind": "SCALAR"},
        ]
        service, _ = make_service({"__schema": {"types": types}})
        assert service.list_tables() == [{"name": "contacts", "description": "People"}]

    def test_error_prefix(self, make_service):
        service, _ = make_service(UpstreamError("401 Unauthorized"))
        with pytest.raises(UpstreamError, match="^Failed to list tables: 401"):
            service.list_tables()


class TestGetTableSchema:
    def test_uses_variables(self, make_service):
        service, connector = make_service(CONTACTS_SCHEMA)
        result = service.get_table_schema(GetTableSchemaRequest(table_name="contacts"))
        assert result == CONTACTS_SCHEMA
        query, variables = connector.calls[0]
        assert "$name: String!" in query
        assert variables == {"name": "contacts"}

    def test_unknown_table(self, make_service):
        service, _ = make_service({"__type": None})
        assert service.get_table_schema(GetTableSchemaRequest(table_name="nope")) == {
            "__type": None
        }

    def test_hostile_name_is_only_a_variable(self, make_service):
        service, connector = make_service({"__type": None})
        service.get_table_schema(GetTableSchemaRequest(table_name='x") { name } #'))
        query, variables = connector.calls[0]
        assert "#" not in query
        assert variables == {"name": 'x") { name } #'}


class TestQueryTable:
    def test_builds_document(self, make_service):
        service, connector = make_service({"contacts": [{"id": "rec1"}]})
        request = QueryTableRequest(
            table_name="contacts",
            fields=["id", "firstName"],
            filter={"type": "Student"},
            sort=[{"field": "lastName", "direction": "desc"}],
            limit=10,
            offset=0,
        )
        assert service.query_table(request) == {"contacts": [{"id": "rec1"}]}
        query, _ = connector.calls[0]
        assert query.startswith("query QueryTable {")
        assert (
            'contacts(_filter: {type: "Student"}, _order_by: {lastName: "desc"}, '
            "_page_size: 10, _page: 1) {" in query
        )
        assert "    firstName\n" in query

    def test_default_selection(self, make_service):
        service, connector = make_service({"contacts": []})
        service.query_table(QueryTableRequest(table_name="contacts"))
        query, _ = connector.calls[0]
        assert "contacts {\n    id\n    __typename\n  }" in query

    @pytest.mark.parametrize(
        "upstream,hint",
        [
            ("Unknown type Int", "BaseQL uses Float instead of Int"),
            ('Unknown argument "limit"', "_filter, _page_size, _page, _order_by"),
            ('Cannot query field "nope"', "use getTableSchema"),
        ],
    )
    def test_hints(self, make_service, upstream, hint):
        service, _ = make_service(UpstreamError(upstream))
        with pytest.raises(UpstreamError) as exc_info:
            service.query_table(QueryTableRequest(table_name="contacts"))
        message = str(exc_info.value)
        assert message.startswith(f"Failed to query table: {upstream}. ")
        assert hint in message
        assert exc_info.value.hint is not None

    def test_unknown_error_has_no_hint(self, make_service):
        service, _ = make_service(UpstreamError("rate limited"))
        with pytest.raises(UpstreamError, match="^Failed to query table: rate limited$"):
            service.query_table(QueryTableRequest(table_name="contacts"))


class TestSearchTable:
    def test_searches_first_string_field(self, make_service):
        data = {"contacts": [{"id": "rec1", "firstName": "Ada"}]}
        service, connector = make_service(CONTACTS_SCHEMA, data)
        result = service.search_table(
            SearchTableRequest(table_name="contacts", search_term="Ada")
        )

        assert result["searchTerm"] == "Ada"
        assert result["fieldsSearched"] == ["firstName", "email"]
        assert result["primarySearchField"] == "firstName"
        assert result["limit"] == 10
        assert result["results"] == data
        assert 'searched primary field "firstName"' in result["note"]

        assert len(connector.calls) == 2
        query, _ = connector.calls[1]
        assert 'contacts(_filter: {firstName: "Ada"}, _page_size: 10) {' in query
        assert "    id\n    firstName\n    email\n" in query

    def test_explicit_fields(self, make_service):
        service, connector = make_service(CONTACTS_SCHEMA, {"contacts": []})
        result = service.search_table(
            SearchTableRequest(
                table_name="contacts", search_term="a@b.c", fields=["age", "email"], limit=3
            )
        )
        assert result["fieldsSearched"] == ["email"]
        query, _ = connector.calls[1]
        assert '_filter: {email: "a@b.c"}, _page_size: 3' in query

    def test_no_string_fields(self, make_service):
        service, connector = make_service(CONTACTS_SCHEMA)
        with pytest.raises(
            InvalidArgumentError, match='No searchable text fields found in table "contacts"'
        ):
            service.search_table(
                SearchTableRequest(table_name="contacts", search_term="x", fields=["age"])
            )
        assert len(connector.calls) == 1

    def test_unknown_table_has_nothing_to_search(self, make_service):
        service, connector = make_service({"__type": None})
        with pytest.raises(InvalidArgumentError):
            service.search_table(SearchTableRequest(table_name="nope", search_term="x"))
        assert len(connector.calls) == 1


class TestGetFieldOptions:
    def test_counts_values(self, make_service):
        records = [{"status": "Open"}, {"status": "Done"}, {"status": "Open"}, {"status": None}]
        service, connector = make_service({"tasks": records})
        result = service.get_field_options(
            GetFieldOptionsRequest(table_name="tasks", field_name="status", sample_size=50)
        )
        assert result["tableName"] == "tasks"
        assert result["fieldName"] == "status"
        assert result["sampleSize"] == 4
        assert result["values"][0] == {"value": "Open", "count": 2}
        assert result["nullCount"] == 1

        query, _ = connector.calls[0]
        assert query.startswith("query GetFieldOptions {")
        assert "tasks(_page_size: 50) {\n    status\n  }" in query

    def test_empty_table(self, make_service):
        service, _ = make_service({"tasks": []})
        result = service.get_field_options(
            GetFieldOptionsRequest(table_name="tasks", field_name="status")
        )
        assert result["sampleSize"] == 0
        assert result["totalUnique"] == 0
        assert result["values"] == []

    def test_error_prefix(self, make_service):
        service, _ = make_service(UpstreamError("boom"))
        with pytest.raises(UpstreamError, match="^Failed to get field options: boom"):
            service.get_field_options(GetFieldOptionsRequest(table_name="t", field_name="f"))


class TestResources:
    def test_schema_resource(self, make_service):
        payload = {"__schema": {"types": [{"name": "contacts", "kind": "OBJECT"}]}}
        service, _ = make_service(payload)
        assert json.loads(service.read_resource(SCHEMA_RESOURCE_URI)) == payload

    def test_unknown_resource(self, make_service):
        service, connector = make_service()
        with pytest.raises(NotFoundError, match="Unknown resource: baseql://nope"):
            service.read_resource("baseql://nope")
        assert connector.calls == []


def test_hint_for_error():
    assert hint_for_error("all good") is None
    assert "Float" in hint_for_error("Unknown type Int")


class TestConfiguration:
    def test_unconfigured_service_guards_connector(self, unconfigured_settings):
        service = BaseQLService(unconfigured_settings)
        assert not service.is_configured
        with pytest.raises(ConfigurationError, match="BASEQL_API_ENDPOINT"):
            service.require_configured()
        with pytest.raises(ConfigurationError):
            _ = service.connector

    def test_configured_service_exposes_connector(self, make_service):
        service, connector = make_service()
        service.require_configured()
        assert service.connector is connector
