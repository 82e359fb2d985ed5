"""Typed async HTTP client for the task API."""

import logging
from types import TracebackType
from typing import Any, Self
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from taskboard.core.config import settings
from taskboard.domain.create_models import TaskCreate
from taskboard.domain.task import Task, TaskFilters, TaskStats
from taskboard.domain.update_models import TaskUpdate


logger = logging.getLogger(__name__)

HTTP_NO_CONTENT = 204
NETWORK_ERROR_MESSAGE = "Network error or server unavailable"

_task_list_adapter = TypeAdapter(list[Task])


class TaskClientError(Exception):
    """Base class for every error raised by TaskClient."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiError(TaskClientError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class NetworkError(TaskClientError):
    """The API could not be reached (connection failure, timeout, ...)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE) -> None:
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    """Pull ``error`` out of a JSON error body, falling back to ``HTTP <status>``."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return f"HTTP {response.status_code}"


class TaskClient:
    """One method per task API operation.

    Usage:
        async with TaskClient("http://localhost:3001/api") as client:
            tasks = await client.list_tasks(TaskFilters(status=TaskStatus.PENDING))
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "base_url": base_url or settings.api_base_url,
            "headers": {"Content-Type": "application/json"},
            "transport": transport,
        }
        # Without an explicit timeout httpx's default applies
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.warning("task_api_unreachable", extra={"method": method, "path": path, "error": str(e)})
            raise NetworkError() from e

        if not response.is_success:
            message = _error_message(response)
            logger.info(
                "task_api_error",
                extra={"method": method, "path": path, "status": response.status_code, "error": message},
            )
            raise ApiError(response.status_code, message)

        if response.status_code == HTTP_NO_CONTENT:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TaskClientError("Invalid JSON in API response") from e

    @staticmethod
    def _task_path(task_id: str) -> str:
        return f"/tasks/{quote(task_id, safe='')}"

    @staticmethod
    def _parse(model: Any, payload: Any) -> Any:
        try:
            if isinstance(model, TypeAdapter):
                return model.validate_python(payload)
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise TaskClientError("Unexpected API response shape") from e

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/health")

    async def list_tasks(self, filters: TaskFilters | None = None) -> list[Task]:
        """List tasks; only filters that are set become query parameters."""
        params = filters.to_query_params() if filters is not None else None
        payload = await self._request("GET", "/tasks", params=params)
        return self._parse(_task_list_adapter, payload)

    async def get_task(self, task_id: str) -> Task:
        return self._parse(Task, await self._request("GET", self._task_path(task_id)))

    async def create_task(self, data: TaskCreate) -> Task:
        body = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return self._parse(Task, await self._request("POST", "/tasks", json=body))

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        """Send only the fields set on ``data``; explicit None clears a field."""
        body = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return self._parse(Task, await self._request("PUT", self._task_path(task_id), json=body))

    async def toggle_task(self, task_id: str) -> Task:
        return self._parse(Task, await self._request("PATCH", f"{self._task_path(task_id)}/toggle"))

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", self._task_path(task_id))

    async def get_stats(self) -> TaskStats:
        return self._parse(TaskStats, await self._request("GET", "/tasks/stats/overview"))
