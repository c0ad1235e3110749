"""Schema-driven resource dispatcher.

Turns a normalized request into catalog lookups and a parameterized
statement, runs it, and classifies the outcome as an Envelope:

    index       GET    -> 200 {resources: [...]}       other -> 501
    table       GET    -> 200 [rows]                   POST  -> 201 row
    table_item  GET    -> 200 row | 404 "Not Found"
    table/item  other  -> 405

The dispatcher holds no per-request state and is shared by all requests.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from pprint import pformat
from typing import Any

from autorest.api.envelope import Envelope, from_error, wrap
from autorest.api.schemas import Resource, ResourceListResponse, derive_location
from autorest.core.connections import ConnectionManager
from autorest.core.errors import (
    AutorestError,
    DatabaseError,
    InvalidArgument,
    MethodNotSupported,
    NotFound,
)
from autorest.core.logging import get_logger
from autorest.query.builder import (
    ID_COLUMN,
    build_insert,
    build_select_by_id,
    build_select_filtered,
)
from autorest.query.coercion import INT_MAX, INT_MIN, filters_from_params
from autorest.query.execution import execute_insert, fetch_all, fetch_one
from autorest.schema.catalog import SchemaCatalog

logger = get_logger(__name__)


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    OTHER = "OTHER"

    @classmethod
    def from_http(cls, name: str) -> Method:
        name = name.upper()
        if name == "GET":
            return cls.GET
        if name == "POST":
            return cls.POST
        return cls.OTHER


class Route(str, Enum):
    INDEX = "index"
    ECHO = "echo"
    TABLE = "table"
    TABLE_ITEM = "table_item"


@dataclass(frozen=True)
class ResourceRequest:
    """Request as handed over by the router.

    Attributes:
        method: GET, POST or OTHER
        route: Which route template matched
        table: ``table`` path parameter
        id: ``id`` path parameter, only on the item route
        query_params: Query string; repeated keys map to a list of values
        body: Raw request body
        base_url: Base address of the request, used for resource locations
        http_method: Method name as received
    """

    method: Method
    route: Route
    table: str | None = None
    id: str | None = None
    query_params: Mapping[str, str | list[str]] = field(default_factory=dict)
    body: bytes | None = None
    base_url: str = ""
    http_method: str = ""


def parse_body(body: bytes | None) -> dict[str, Any]:
    """Parse a POST body as a JSON object of column -> value.

    Values must be scalars; nested objects and arrays have no column binding,
    and integers must fit the BIGINT range.

    Raises:
        InvalidArgument: If the body is missing, not a JSON object, or has
            non-scalar values
    """
    if not body:
        raise InvalidArgument("Request body must be a JSON object")
    try:
        data = json.loads(body)
    except ValueError as e:
        raise InvalidArgument(f"Request body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidArgument("Request body must be a JSON object")
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            raise InvalidArgument(f"{key!r} must be a scalar value")
        if isinstance(value, int) and not INT_MIN <= value <= INT_MAX:
            raise InvalidArgument(f"{key!r} is out of range, got {value}")
    return data


class ResourceDispatcher:
    """Dispatches normalized requests against the live schema."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        manager: ConnectionManager,
        *,
        base_url: str | None = None,
    ):
        self._catalog = catalog
        self._manager = manager
        self._base_url = base_url

    def dispatch(self, request: ResourceRequest) -> Envelope:
        """Handle one request and return its envelope.

        Taxonomy errors (including DatabaseError) are converted here; anything
        else propagates to the application's exception handlers.
        """
        try:
            envelope = self._route(request)
        except DatabaseError as e:
            logger.warning("database_error", table=request.table, error=e.message)
            envelope = from_error(e)
        except AutorestError as e:
            envelope = from_error(e)

        logger.info(
            "request_dispatched",
            method=request.http_method or request.method.value,
            route=request.route.value,
            table=request.table,
            status=envelope.status,
        )
        return envelope

    def echo(self, request: ResourceRequest) -> str:
        """Plain-text dump of the normalized request, for debugging."""
        dump = asdict(request)
        dump["method"] = request.method.value
        dump["route"] = request.route.value
        dump["query_params"] = dict(request.query_params)
        return pformat(dump) + "\n"

    def _route(self, request: ResourceRequest) -> Envelope:
        if request.route is Route.INDEX:
            if request.method is Method.GET:
                return self._index(request)
            raise MethodNotSupported("Not Implemented", status=501)

        if request.route is Route.ECHO:
            return wrap(200, self.echo(request))

        if request.method is Method.GET:
            return self._get(request)
        if request.method is Method.POST and request.route is Route.TABLE:
            return self._post(request)
        raise MethodNotSupported("Method Not Allowed")

    @property
    def _sql_options(self) -> dict[str, Any]:
        return {
            "quote": self._manager.dialect.identifier_preparer.quote,
            "schema": self._catalog.schema,
        }

    def _require_table(self, table: str | None) -> str:
        if not table or not self._catalog.table_exists(table):
            raise NotFound(f"{table} is not a valid resource.")
        return table

    def _index(self, request: ResourceRequest) -> Envelope:
        base_url = self._base_url or request.base_url
        resources = [
            Resource(name=name, location=derive_location(name, base_url))
            for name in self._catalog.list_tables()
        ]
        return wrap(200, ResourceListResponse(resources=resources).model_dump())

    def _get(self, request: ResourceRequest) -> Envelope:
        table = self._require_table(request.table)
        columns = self._catalog.list_columns(table)

        # Single row vs. collection depends only on the id path parameter
        if request.id is not None:
            statement = build_select_by_id(table, columns, request.id, **self._sql_options)
            with self._manager.connect() as conn:
                row = fetch_one(conn, statement)
            if row is None:
                raise NotFound("Not Found")
            return wrap(200, row)

        filters = filters_from_params(request.query_params)
        statement = build_select_filtered(table, columns, filters, **self._sql_options)
        with self._manager.connect() as conn:
            rows = fetch_all(conn, statement)
        return wrap(200, rows)

    def _post(self, request: ResourceRequest) -> Envelope:
        table = self._require_table(request.table)
        columns = self._catalog.list_columns(table)
        data = parse_body(request.body)

        options = self._sql_options
        returning = columns if self._manager.dialect.insert_returning else None
        statement = build_insert(table, data, columns=columns, returning=returning, **options)

        with self._manager.begin() as conn:
            row, lastrowid = execute_insert(conn, statement)
            if row is None and lastrowid and ID_COLUMN in columns:
                row = fetch_one(conn, build_select_by_id(table, columns, int(lastrowid), **options))

        logger.debug("row_inserted", table=table, returned=row is not None)
        return wrap(201, row if row is not None else data)


__all__ = [
    "Method",
    "Route",
    "ResourceRequest",
    "ResourceDispatcher",
    "parse_body",
]
