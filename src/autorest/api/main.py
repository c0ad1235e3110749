"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from autorest import __version__
from autorest.api import routers
from autorest.api.dispatcher import ResourceDispatcher
from autorest.api.envelope import from_error, render, wrap
from autorest.core.config import Settings, get_settings
from autorest.core.connections import ConnectionConfig, ConnectionManager
from autorest.core.errors import AutorestError, DatabaseError
from autorest.core.logging import get_logger
from autorest.schema.catalog import SchemaCatalog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler.

    The engine is created by create_app(); connections are opened lazily per
    request. On shutdown the pool is disposed.
    """
    yield

    manager: ConnectionManager = app.state.manager
    manager.close()


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return render(wrap(exc.status_code, exc.detail), headers=exc.headers)


async def _autorest_error_handler(request: Request, exc: AutorestError) -> JSONResponse:
    return render(from_error(exc))


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("unhandled_database_error", path=request.url.path, error=str(exc))
    return render(from_error(DatabaseError.from_exception(exc)))


def create_app(
    settings: Settings | None = None,
    title: str = "autorest",
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, read from AUTOREST_* env vars.
        title: API title

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    manager = ConnectionManager(ConnectionConfig.from_settings(settings))
    manager.initialize()
    catalog = SchemaCatalog(manager, schema=settings.db_schema)

    app = FastAPI(
        title=title,
        version=__version__,
        description="Generic REST API over the tables of a relational database",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.manager = manager
    app.state.dispatcher = ResourceDispatcher(catalog, manager, base_url=settings.base_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors outside the dispatcher keep the envelope shape
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(AutorestError, _autorest_error_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)

    app.include_router(routers.resources.router, tags=["resources"])

    return app
