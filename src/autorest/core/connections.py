"""Thread-safe connection management for the exposed database.

A single SQLAlchemy engine (and its pool) is shared by every request.
Connections are checked out per operation and returned immediately, so no
request state outlives the call that created it.

Usage:
    from autorest.core.connections import ConnectionConfig, ConnectionManager

    config = ConnectionConfig(database_url="postgresql+psycopg://localhost/addressbook")
    manager = ConnectionManager(config)
    manager.initialize()

    # Read (connection returned to the pool on exit)
    with manager.connect() as conn:
        rows = conn.execute(text("SELECT 1")).all()

    # Write (committed on exit, rolled back on error)
    with manager.begin() as conn:
        conn.execute(text("INSERT INTO people (name) VALUES (:name)"), {"name": "Ada"})

    manager.close()
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Dialect, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from autorest.core.config import Settings
from autorest.core.errors import DatabaseError
from autorest.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection configuration for the exposed database.

    Attributes:
        database_url: SQLAlchemy database URL
        schema: Schema whose tables are exposed (None = connection default)
        pool_size: SQLAlchemy connection pool size
        max_overflow: Maximum overflow connections beyond pool_size
        pool_timeout: Seconds to wait for a connection from pool
        echo_sql: Whether to echo SQL statements (for debugging)
    """

    database_url: str
    schema: str | None = None

    # SQLAlchemy pool settings
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: float = 30.0

    # Debug
    echo_sql: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> ConnectionConfig:
        """Create config from application settings."""
        return cls(
            database_url=settings.database_url,
            schema=settings.db_schema,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            echo_sql=settings.echo_sql,
        )

    @property
    def backend(self) -> str:
        """Backend name of the URL (postgresql, sqlite, mysql, ...)."""
        return make_url(self.database_url).get_backend_name()


@dataclass
class ConnectionManager:
    """Owns the SQLAlchemy engine for the exposed database.

    Thread Safety:
    - The engine and its pool are safe to share between threads
    - Each connect()/begin() call checks out its own connection

    Database failures raised inside connect()/begin() are re-raised as
    DatabaseError carrying the driver message.
    """

    config: ConnectionConfig
    _engine: Engine | None = field(default=None, init=False, repr=False)
    _init_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def initialize(self) -> None:
        """Create the engine and its connection pool.

        Does not open a connection; an unreachable database surfaces on the
        first request. Safe to call multiple times (idempotent).
        """
        with self._init_lock:
            if self._engine is not None:
                return

            kwargs: dict[str, Any] = {"echo": self.config.echo_sql, "pool_pre_ping": True}
            if self.config.backend == "sqlite":
                # Sync endpoints run in a thread pool
                kwargs["connect_args"] = {"check_same_thread": False}
            else:
                kwargs.update(
                    pool_size=self.config.pool_size,
                    max_overflow=self.config.max_overflow,
                    pool_timeout=self.config.pool_timeout,
                )

            engine = create_engine(self.config.database_url, **kwargs)

            if self.config.backend == "sqlite":

                @event.listens_for(engine, "connect")
                def configure_sqlite(dbapi_conn: Any, connection_record: Any) -> None:
                    cursor = dbapi_conn.cursor()
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.close()

            self._engine = engine
            logger.info(
                "engine_created",
                backend=self.config.backend,
                schema=self.config.schema,
            )

    def _ensure_initialized(self) -> Engine:
        if self._engine is None:
            raise RuntimeError(
                "ConnectionManager not initialized. Call manager.initialize() first."
            )
        return self._engine

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Get a pooled connection for read operations.

        Yields:
            SQLAlchemy Connection, returned to the pool on exit

        Raises:
            DatabaseError: If connecting or executing fails
        """
        engine = self._ensure_initialized()
        try:
            with engine.connect() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise DatabaseError.from_exception(e) from e

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Get a pooled connection inside a transaction.

        Commits on normal exit, rolls back if the block raises.

        Raises:
            DatabaseError: If connecting, executing or committing fails
        """
        engine = self._ensure_initialized()
        try:
            with engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise DatabaseError.from_exception(e) from e

    @property
    def engine(self) -> Engine:
        """Get the SQLAlchemy engine.

        Raises:
            RuntimeError: If manager not initialized
        """
        return self._ensure_initialized()

    @property
    def dialect(self) -> Dialect:
        """Dialect of the engine (identifier quoting, RETURNING support)."""
        return self._ensure_initialized().dialect

    def close(self) -> None:
        """Dispose of the engine and its pool.

        Safe to call multiple times.
        """
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


__all__ = [
    "ConnectionConfig",
    "ConnectionManager",
]
