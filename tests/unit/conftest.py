"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from taskboard.main import app
from tests.unit.mocks import InMemoryTaskStore


@pytest.fixture
def in_memory_store(override_store) -> InMemoryTaskStore:
    """Provides a fresh InMemoryTaskStore, also used by the API for this test."""
    return override_store(InMemoryTaskStore())


@pytest.fixture
def api_client(in_memory_store: InMemoryTaskStore) -> Iterator[TestClient]:
    """TestClient for the API backed by the in-memory store.

    The lifespan is not run, so no database file is created. Unexpected
    exceptions come back as 500 responses instead of being re-raised.
    """
    yield TestClient(app, raise_server_exceptions=False)
