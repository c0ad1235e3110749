"""Shared pytest fixtures for all tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from autorest.core.connections import ConnectionConfig, ConnectionManager
from autorest.schema.catalog import SchemaCatalog

SCHEMA = [
    "CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT NOT NULL)",
    """
    CREATE TABLE addresses (
        id INTEGER PRIMARY KEY,
        personid INTEGER REFERENCES people(id),
        street TEXT,
        city TEXT
    )
    """,
]


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Create a SQLite database file with an empty people/addresses schema.

    A file (not :memory:) so every pooled connection sees the same data.
    """
    url = f"sqlite:///{tmp_path / 'addressbook.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
    engine.dispose()
    return url


@pytest.fixture
def unreachable_url(tmp_path: Path) -> str:
    """URL of a SQLite file that cannot be opened (parent directory missing)."""
    return f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}"


@pytest.fixture
def seeded(database_url: str) -> str:
    """Database with two people and one address."""
    engine = create_engine(database_url)
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO people (id, name) VALUES (:id, :name)"),
            [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Grace"}],
        )
        conn.execute(
            text(
                "INSERT INTO addresses (id, personid, street, city) "
                "VALUES (1, 1, '12 St James Square', 'London')"
            )
        )
    engine.dispose()
    return database_url


@pytest.fixture
def manager(database_url: str) -> Iterator[ConnectionManager]:
    """Initialized ConnectionManager on the test database."""
    connection_manager = ConnectionManager(ConnectionConfig(database_url=database_url))
    connection_manager.initialize()
    yield connection_manager
    connection_manager.close()


@pytest.fixture
def catalog(manager: ConnectionManager) -> SchemaCatalog:
    return SchemaCatalog(manager)
