"""API server entry point.

Usage:
    # Via script
    autorest-api

    # Via the CLI
    autorest serve --database-url postgresql+psycopg://localhost/addressbook

    # Via uvicorn directly
    uvicorn autorest.api.main:create_app --factory --port 3000
"""

from autorest.core.config import Settings, get_settings
from autorest.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def run_server(settings: Settings) -> None:
    """Serve the API with uvicorn until interrupted."""
    import uvicorn

    from autorest.api.main import create_app

    configure_logging(log_level=settings.log_level, log_format=settings.log_format)
    logger.info(
        "server_starting",
        host=settings.host,
        port=settings.port,
        schema=settings.db_schema,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Start the API server configured from AUTOREST_* environment variables."""
    run_server(get_settings())


if __name__ == "__main__":
    main()
