"""Task view store: owns one TaskViewState and runs the CRUD actions through TaskClient."""

import asyncio
import logging

from taskboard.client.task_client import ApiError, TaskClient, TaskClientError
from taskboard.domain.create_models import TaskCreate
from taskboard.domain.task import Task, TaskFilters
from taskboard.domain.update_models import TaskUpdate
from taskboard.web.state import (
    Action,
    ActionFailed,
    FiltersChanged,
    MutationStarted,
    RefreshFailed,
    RefreshStarted,
    RefreshSucceeded,
    StatsLoaded,
    TaskCreated,
    TaskRemoved,
    TaskReplaced,
    TaskViewState,
    reduce,
)


logger = logging.getLogger(__name__)


def user_message(error: TaskClientError, fallback: str) -> str:
    """API errors carry a message meant for users; anything else gets the fallback."""
    if isinstance(error, ApiError):
        return error.message
    return fallback


class TaskViewStore:
    """State container for the task pages.

    Mutations are never applied optimistically: the local list only changes
    after the API confirms, so a failure just records an error and leaves the
    list as it was. Stats are re-fetched after every successful mutation.
    """

    def __init__(self, client: TaskClient, filters: TaskFilters | None = None) -> None:
        self._client = client
        self._state = TaskViewState(filters=filters or TaskFilters())

    @property
    def state(self) -> TaskViewState:
        return self._state

    def dispatch(self, action: Action) -> TaskViewState:
        self._state = reduce(self._state, action)
        return self._state

    def _fail(self, error: TaskClientError, fallback: str) -> None:
        message = user_message(error, fallback)
        logger.warning("task_view_action_failed", extra={"error": message, "cause": str(error)})
        self.dispatch(ActionFailed(message))

    async def refresh(self) -> bool:
        """Fetch list and stats together; keep the previous data if either request fails."""
        self.dispatch(RefreshStarted())
        try:
            async with asyncio.TaskGroup() as group:
                tasks_request = group.create_task(self._client.list_tasks(self._state.filters))
                stats_request = group.create_task(self._client.get_stats())
        except ExceptionGroup as eg:
            # The first failure cancels the sibling request
            client_errors, others = eg.split(TaskClientError)
            if client_errors is None or others is not None:
                raise
            e = client_errors.exceptions[0]
            message = user_message(e, "Failed to fetch tasks")
            logger.warning("task_view_refresh_failed", extra={"error": message, "cause": str(e)})
            self.dispatch(RefreshFailed(message))
            return False

        self.dispatch(RefreshSucceeded(tasks=tuple(tasks_request.result()), stats=stats_request.result()))
        return True

    async def refresh_stats(self) -> bool:
        try:
            stats = await self._client.get_stats()
        except TaskClientError as e:
            self._fail(e, "Failed to fetch task statistics")
            return False
        self.dispatch(StatsLoaded(stats))
        return True

    async def set_filters(self, filters: TaskFilters) -> bool:
        """Switch filter/sort configuration; re-fetches only when it actually changed."""
        if filters == self._state.filters:
            return False
        self.dispatch(FiltersChanged(filters))
        await self.refresh()
        return True

    async def get_task(self, task_id: str) -> Task | None:
        """Return a task from the loaded list, or fetch it."""
        for task in self._state.tasks:
            if task.id == task_id:
                return task
        try:
            return await self._client.get_task(task_id)
        except TaskClientError as e:
            self._fail(e, "Failed to fetch task")
            return None

    async def create_task(self, data: TaskCreate) -> Task | None:
        self.dispatch(MutationStarted())
        try:
            task = await self._client.create_task(data)
        except TaskClientError as e:
            self._fail(e, "Failed to create task")
            return None

        self.dispatch(TaskCreated(task))
        await self.refresh_stats()
        return task

    async def update_task(self, task_id: str, data: TaskUpdate) -> Task | None:
        self.dispatch(MutationStarted())
        try:
            task = await self._client.update_task(task_id, data)
        except TaskClientError as e:
            self._fail(e, "Failed to update task")
            return None

        self.dispatch(TaskReplaced(task))
        # A due date change moves the overdue count too, not only a status change
        await self.refresh_stats()
        return task

    async def toggle_task(self, task_id: str) -> Task | None:
        self.dispatch(MutationStarted())
        try:
            task = await self._client.toggle_task(task_id)
        except TaskClientError as e:
            self._fail(e, "Failed to toggle task status")
            return None

        self.dispatch(TaskReplaced(task))
        await self.refresh_stats()
        return task

    async def delete_task(self, task_id: str) -> bool:
        self.dispatch(MutationStarted())
        try:
            await self._client.delete_task(task_id)
        except TaskClientError as e:
            self._fail(e, "Failed to delete task")
            return False

        self.dispatch(TaskRemoved(task_id))
        await self.refresh_stats()
        return True
