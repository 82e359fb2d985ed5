"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Callable, Iterator

import httpx
import pytest

from taskboard.client.task_client import TaskClient
from taskboard.interface.dependencies import get_task_store
from taskboard.main import app
from taskboard.store.base import TaskStore


API_BASE_URL = "http://testserver/api"


@pytest.fixture
def override_store() -> Iterator[Callable[[TaskStore], TaskStore]]:
    """Point the API's TaskStore dependency at a store chosen by the test.

    Usage:
        override_store(InMemoryTaskStore())
    """

    def _override(store: TaskStore) -> TaskStore:
        app.dependency_overrides[get_task_store] = lambda: store
        return store

    yield _override
    app.dependency_overrides.pop(get_task_store, None)


def make_task_client(**kwargs) -> TaskClient:
    """TaskClient that calls the API app in-process, without a network or lifespan."""
    return TaskClient(API_BASE_URL, transport=httpx.ASGITransport(app=app), **kwargs)


@pytest.fixture
async def api_task_client() -> AsyncIterator[TaskClient]:
    """TaskClient wired straight to the API app; pair with override_store."""
    async with make_task_client() as client:
        yield client
