"""Tests for the resource dispatcher, without the HTTP layer."""

import pytest

from autorest.api.dispatcher import (
    Method,
    ResourceDispatcher,
    ResourceRequest,
    Route,
    parse_body,
)
from autorest.core.connections import ConnectionManager
from autorest.core.errors import InvalidArgument
from autorest.schema.catalog import SchemaCatalog


@pytest.fixture
def dispatcher(catalog: SchemaCatalog, manager: ConnectionManager) -> ResourceDispatcher:
    return ResourceDispatcher(catalog, manager, base_url="http://localhost:3000")


def request(method: Method, route: Route, **kwargs: object) -> ResourceRequest:
    return ResourceRequest(method=method, route=route, **kwargs)  # type: ignore[arg-type]


class TestMethod:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("GET", Method.GET), ("get", Method.GET), ("POST", Method.POST), ("PUT", Method.OTHER)],
    )
    def test_from_http(self, name: str, expected: Method):
        assert Method.from_http(name) is expected


class TestIndex:
    def test_resources_use_configured_base_url(self, dispatcher: ResourceDispatcher):
        envelope = dispatcher.dispatch(request(Method.GET, Route.INDEX))
        assert envelope.status == 200
        assert {"name": "people", "location": "http://localhost:3000/people"} in (
            envelope.payload["resources"]
        )

    def test_other_method(self, dispatcher: ResourceDispatcher):
        envelope = dispatcher.dispatch(request(Method.OTHER, Route.INDEX))
        assert envelope.body == {"error": "Not Implemented", "status": 501}


class TestTableRoutes:
    def test_insert_then_fetch(self, dispatcher: ResourceDispatcher):
        created = dispatcher.dispatch(
            request(Method.POST, Route.TABLE, table="people", body=b'{"name": "Ada"}')
        )
        assert created.body == {"result": {"id": 1, "name": "Ada"}, "status": 201}

        fetched = dispatcher.dispatch(
            request(Method.GET, Route.TABLE_ITEM, table="people", id="1")
        )
        assert fetched.body == {"result": {"id": 1, "name": "Ada"}, "status": 200}

    def test_empty_object_inserts_defaults(self, dispatcher: ResourceDispatcher):
        envelope = dispatcher.dispatch(
            request(Method.POST, Route.TABLE, table="addresses", body=b"{}")
        )
        assert envelope.status == 201
        assert envelope.payload == {"id": 1, "personid": None, "street": None, "city": None}

    def test_structured_params_are_not_filters(
        self, seeded: str, dispatcher: ResourceDispatcher
    ):
        envelope = dispatcher.dispatch(
            request(
                Method.GET,
                Route.TABLE,
                table="people",
                query_params={"name": ["Ada", "Grace"]},
            )
        )
        assert envelope.status == 200
        assert len(envelope.payload) == 2

    @pytest.mark.parametrize("route", [Route.TABLE, Route.TABLE_ITEM])
    def test_other_methods(self, dispatcher: ResourceDispatcher, route: Route):
        envelope = dispatcher.dispatch(request(Method.OTHER, route, table="people", id="1"))
        assert envelope.body == {"error": "Method Not Allowed", "status": 405}

    def test_missing_table_name(self, dispatcher: ResourceDispatcher):
        envelope = dispatcher.dispatch(request(Method.GET, Route.TABLE))
        assert envelope.status == 404


class TestEcho:
    def test_echo_route_wraps_dump(self, dispatcher: ResourceDispatcher):
        envelope = dispatcher.dispatch(
            request(Method.GET, Route.ECHO, query_params={"q": "1"}, http_method="GET")
        )
        assert envelope.status == 200
        assert "'route': 'echo'" in envelope.payload
        assert "'q': '1'" in envelope.payload


class TestParseBody:
    def test_object(self):
        assert parse_body(b'{"name": "Ada", "age": 36}') == {"name": "Ada", "age": 36}

    @pytest.mark.parametrize(
        "body",
        [
            None,
            b"",
            b"[1, 2]",
            b'"Ada"',
            b"{",
            b"\xff\xfe",
            b'{"name": {"a": 1}}',
            b'{"tags": [1, 2]}',
            b'{"id": 9223372036854775808}',
            b'{"id": ' + b"9" * 5000 + b"}",
        ],
    )
    def test_rejects(self, body: bytes | None):
        with pytest.raises(InvalidArgument):
            parse_body(body)
