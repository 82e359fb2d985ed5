"""HTTP client for the task API."""

from taskboard.client.task_client import ApiError, NetworkError, TaskClient, TaskClientError


__all__ = ["ApiError", "NetworkError", "TaskClient", "TaskClientError"]
