"""Generic table resource endpoints.

Routes are matched in declaration order, so ``/echo`` shadows a table
named "echo".
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from autorest.api.deps import DispatcherDep
from autorest.api.dispatcher import Method, ResourceRequest, Route
from autorest.api.envelope import render
from autorest.core.logging import log_context

router = APIRouter()

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _query_params(request: Request) -> dict[str, str | list[str]]:
    """Single-valued keys map to a string, repeated keys to a list."""
    params: dict[str, str | list[str]] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    return params


async def _normalize(
    request: Request,
    route: Route,
    table: str | None = None,
    item_id: str | None = None,
) -> ResourceRequest:
    body = await request.body() if route is not Route.INDEX else None
    return ResourceRequest(
        method=Method.from_http(request.method),
        route=route,
        table=table,
        id=item_id,
        query_params=_query_params(request),
        body=body or None,
        base_url=str(request.base_url),
        http_method=request.method,
    )


async def _dispatch(
    dispatcher: DispatcherDep, request: Request, normalized: ResourceRequest
) -> Response:
    with log_context(method=request.method, path=request.url.path):
        envelope = await run_in_threadpool(dispatcher.dispatch, normalized)
    return render(envelope)


@router.api_route("/", methods=ALL_METHODS)
async def index(request: Request, dispatcher: DispatcherDep) -> Response:
    """List every table as a resource."""
    return await _dispatch(dispatcher, request, await _normalize(request, Route.INDEX))


@router.api_route("/echo", methods=ALL_METHODS)
async def echo(request: Request, dispatcher: DispatcherDep) -> Response:
    """Echo the normalized request back as plain text."""
    normalized = await _normalize(request, Route.ECHO)
    return PlainTextResponse(dispatcher.echo(normalized))


@router.api_route("/{table}", methods=ALL_METHODS)
async def table_collection(table: str, request: Request, dispatcher: DispatcherDep) -> Response:
    """Filtered rows of a table (GET) or insert one row (POST)."""
    normalized = await _normalize(request, Route.TABLE, table=table)
    return await _dispatch(dispatcher, request, normalized)


@router.api_route("/{table}/{item_id}", methods=ALL_METHODS)
async def table_item(
    table: str, item_id: str, request: Request, dispatcher: DispatcherDep
) -> Response:
    """One row of a table by id."""
    normalized = await _normalize(request, Route.TABLE_ITEM, table=table, item_id=item_id)
    return await _dispatch(dispatcher, request, normalized)
