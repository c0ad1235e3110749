"""Pytest fixtures for API tests."""

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from autorest.api.main import create_app
from autorest.core.config import Settings

BASE_URL = "http://host"

ClientFactory = Callable[..., TestClient]


@pytest.fixture
def client_factory() -> ClientFactory:
    """Build a test client for a database URL plus settings overrides.

    Use as a context manager so the app lifespan runs.
    """

    def make_client(database_url: str, **overrides: object) -> TestClient:
        settings = Settings(_env_file=None, database_url=database_url, **overrides)
        return TestClient(create_app(settings), base_url=BASE_URL)

    return make_client


@pytest.fixture
def test_client(database_url: str, client_factory: ClientFactory) -> Iterator[TestClient]:
    """FastAPI test client on an empty people/addresses database."""
    with client_factory(database_url) as client:
        yield client


@pytest.fixture
def seeded_client(seeded: str, client_factory: ClientFactory) -> Iterator[TestClient]:
    """FastAPI test client on the seeded database."""
    with client_factory(seeded) as client:
        yield client


@pytest.fixture
def unreachable_client(
    unreachable_url: str, client_factory: ClientFactory
) -> Iterator[TestClient]:
    """FastAPI test client whose database cannot be opened."""
    with client_factory(unreachable_url) as client:
        yield client
