"""Unit tests for task_service module."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from taskboard.core.errors import NotFoundError, StoreError, ValidationError
from taskboard.domain.create_models import TaskCreate
from taskboard.domain.task import SortField, SortOrder, TaskFilters, TaskPriority, TaskStatus
from taskboard.domain.update_models import TaskUpdate
from taskboard.services import task_service
from tests.unit.mocks import InMemoryTaskStore, build_task


@pytest.fixture
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.unit
class TestCreateTask:
    async def test_create_assigns_id_and_timestamps(self, store: InMemoryTaskStore) -> None:
        task = await task_service.create_task(
            store=store,
            data=TaskCreate(title="  Write report  ", description="Quarterly numbers"),
        )

        assert uuid.UUID(task.id).version == 4
        assert task.title == "Write report"
        assert task.description == "Quarterly numbers"
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.due_date is None
        assert task.created_at == task.updated_at
        assert store.tasks == [task]

    async def test_create_with_priority_and_due_date(self, store: InMemoryTaskStore) -> None:
        task = await task_service.create_task(
            store=store,
            data=TaskCreate(title="Pay rent", priority=TaskPriority.HIGH, due_date="2030-01-01"),
        )

        assert task.priority == TaskPriority.HIGH
        assert task.due_date == datetime(2030, 1, 1, tzinfo=UTC)

    @pytest.mark.parametrize("title", [None, "", "   "])
    async def test_create_requires_title(self, store: InMemoryTaskStore, title: str | None) -> None:
        with pytest.raises(ValidationError, match="Title is required"):
            await task_service.create_task(store=store, data=TaskCreate(title=title))

        assert store.tasks == []

    async def test_blank_description_is_stored_as_none(self, store: InMemoryTaskStore) -> None:
        task = await task_service.create_task(store=store, data=TaskCreate(title="Tidy", description="   "))

        assert task.description is None

    async def test_each_task_gets_a_distinct_id(self, store: InMemoryTaskStore) -> None:
        first = await task_service.create_task(store=store, data=TaskCreate(title="One"))
        second = await task_service.create_task(store=store, data=TaskCreate(title="Two"))

        assert first.id != second.id


@pytest.mark.unit
class TestGetTask:
    async def test_get_existing_task(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task(title="Find me"))

        task = await task_service.get_task(store=store, task_id=created.id)

        assert task == created

    async def test_get_accepts_uppercase_id(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task())

        task = await task_service.get_task(store=store, task_id=created.id.upper())

        assert task.id == created.id

    async def test_get_unknown_task(self, store: InMemoryTaskStore) -> None:
        with pytest.raises(NotFoundError, match="Task not found"):
            await task_service.get_task(store=store, task_id=str(uuid.uuid4()))

    async def test_malformed_id_never_reaches_store(self, store: InMemoryTaskStore) -> None:
        with pytest.raises(ValidationError, match="Invalid task id"):
            await task_service.get_task(store=store, task_id="not-a-uuid")

        assert store.calls == []


@pytest.mark.unit
class TestListTasks:
    async def test_default_order_is_newest_first(self, store: InMemoryTaskStore) -> None:
        old = await store.create(build_task(title="Old", created_at=BASE_TIME, updated_at=BASE_TIME))
        new_time = BASE_TIME + timedelta(hours=1)
        new = await store.create(build_task(title="New", created_at=new_time, updated_at=new_time))

        tasks = await task_service.list_tasks(store=store)

        assert [t.id for t in tasks] == [new.id, old.id]

    async def test_empty_store_returns_empty_list(self, store: InMemoryTaskStore) -> None:
        assert await task_service.list_tasks(store=store) == []

    async def test_filter_by_status_and_priority(self, store: InMemoryTaskStore) -> None:
        match = await store.create(build_task(status=TaskStatus.PENDING, priority=TaskPriority.HIGH))
        await store.create(build_task(status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH))
        await store.create(build_task(status=TaskStatus.PENDING, priority=TaskPriority.LOW))

        tasks = await task_service.list_tasks(
            store=store,
            filters=TaskFilters(status=TaskStatus.PENDING, priority=TaskPriority.HIGH),
        )

        assert [t.id for t in tasks] == [match.id]

    async def test_priority_sorts_by_rank(self, store: InMemoryTaskStore) -> None:
        for priority in (TaskPriority.MEDIUM, TaskPriority.HIGH, TaskPriority.LOW):
            await store.create(build_task(priority=priority))

        ascending = await task_service.list_tasks(
            store=store, filters=TaskFilters(sort_by=SortField.PRIORITY, order=SortOrder.ASC)
        )
        descending = await task_service.list_tasks(
            store=store, filters=TaskFilters(sort_by=SortField.PRIORITY, order=SortOrder.DESC)
        )

        assert [t.priority for t in ascending] == [TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH]
        assert [t.priority for t in descending] == [TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW]

    @pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
    async def test_tasks_without_due_date_sort_last(self, store: InMemoryTaskStore, order: SortOrder) -> None:
        undated = await store.create(build_task(title="Someday"))
        await store.create(build_task(title="Soon", due_date=BASE_TIME))
        await store.create(build_task(title="Later", due_date=BASE_TIME + timedelta(days=3)))

        tasks = await task_service.list_tasks(store=store, filters=TaskFilters(sort_by=SortField.DUE_DATE, order=order))

        assert tasks[-1].id == undated.id
        expected = ["Soon", "Later"] if order == SortOrder.ASC else ["Later", "Soon"]
        assert [t.title for t in tasks[:2]] == expected

    async def test_title_sort_ignores_case(self, store: InMemoryTaskStore) -> None:
        for title in ("banana", "Apple", "cherry"):
            await store.create(build_task(title=title))

        tasks = await task_service.list_tasks(store=store, filters=TaskFilters(sort_by=SortField.TITLE, order=SortOrder.ASC))

        assert [t.title for t in tasks] == ["Apple", "banana", "cherry"]

    async def test_store_failure_propagates(self, store: InMemoryTaskStore) -> None:
        store.fail()

        with pytest.raises(StoreError):
            await task_service.list_tasks(store=store)


@pytest.mark.unit
class TestUpdateTask:
    async def test_only_present_fields_change(self, store: InMemoryTaskStore) -> None:
        created = await store.create(
            build_task(title="Original", description="Keep me", created_at=BASE_TIME, updated_at=BASE_TIME)
        )

        updated = await task_service.update_task(
            store=store, task_id=created.id, data=TaskUpdate(priority=TaskPriority.HIGH)
        )

        assert updated.priority == TaskPriority.HIGH
        assert updated.title == "Original"
        assert updated.description == "Keep me"
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at

    async def test_empty_description_clears_it(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task(description="Remove me"))

        updated = await task_service.update_task(store=store, task_id=created.id, data=TaskUpdate(description=""))

        assert updated.description is None

    @pytest.mark.parametrize("due_date", [None, ""])
    async def test_null_or_empty_due_date_clears_it(self, store: InMemoryTaskStore, due_date: str | None) -> None:
        created = await store.create(build_task(due_date=BASE_TIME))

        updated = await task_service.update_task(
            store=store, task_id=created.id, data=TaskUpdate.model_validate({"dueDate": due_date})
        )

        assert updated.due_date is None

    async def test_title_is_trimmed(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task())

        updated = await task_service.update_task(store=store, task_id=created.id, data=TaskUpdate(title="  Renamed "))

        assert updated.title == "Renamed"

    async def test_blank_title_is_rejected(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task(title="Keep"))

        with pytest.raises(ValidationError, match="Title cannot be empty"):
            await task_service.update_task(store=store, task_id=created.id, data=TaskUpdate(title="   "))

        assert (await store.get(created.id)).title == "Keep"

    @pytest.mark.parametrize(("field_name", "message"), [("status", "Status cannot be null"), ("priority", "Priority cannot be null")])
    async def test_null_enum_fields_are_rejected(self, store: InMemoryTaskStore, field_name: str, message: str) -> None:
        created = await store.create(build_task())

        with pytest.raises(ValidationError, match=message):
            await task_service.update_task(
                store=store, task_id=created.id, data=TaskUpdate.model_validate({field_name: None})
            )

    async def test_update_unknown_task(self, store: InMemoryTaskStore) -> None:
        with pytest.raises(NotFoundError):
            await task_service.update_task(store=store, task_id=str(uuid.uuid4()), data=TaskUpdate(title="x"))

    async def test_empty_update_still_touches_updated_at(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task(created_at=BASE_TIME, updated_at=BASE_TIME))

        updated = await task_service.update_task(store=store, task_id=created.id, data=TaskUpdate())

        assert updated.updated_at > BASE_TIME
        assert updated.title == created.title


@pytest.mark.unit
class TestToggleTask:
    async def test_toggle_flips_status_both_ways(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task(created_at=BASE_TIME, updated_at=BASE_TIME))

        completed = await task_service.toggle_task(store=store, task_id=created.id)
        pending = await task_service.toggle_task(store=store, task_id=created.id)

        assert completed.status == TaskStatus.COMPLETED
        assert pending.status == TaskStatus.PENDING
        assert completed.updated_at > BASE_TIME
        assert pending.updated_at >= completed.updated_at

    async def test_toggle_unknown_task(self, store: InMemoryTaskStore) -> None:
        with pytest.raises(NotFoundError):
            await task_service.toggle_task(store=store, task_id=str(uuid.uuid4()))


@pytest.mark.unit
class TestDeleteTask:
    async def test_delete_removes_task(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task())

        await task_service.delete_task(store=store, task_id=created.id)

        assert store.tasks == []
        with pytest.raises(NotFoundError):
            await task_service.get_task(store=store, task_id=created.id)

    async def test_delete_twice_reports_not_found(self, store: InMemoryTaskStore) -> None:
        created = await store.create(build_task())
        await task_service.delete_task(store=store, task_id=created.id)

        with pytest.raises(NotFoundError):
            await task_service.delete_task(store=store, task_id=created.id)


@pytest.mark.unit
class TestGetStats:
    async def test_empty_store(self, store: InMemoryTaskStore) -> None:
        stats = await task_service.get_stats(store=store)

        assert (stats.total, stats.completed, stats.pending, stats.overdue) == (0, 0, 0, 0)

    async def test_counts(self, store: InMemoryTaskStore) -> None:
        now = BASE_TIME
        await store.create(build_task(status=TaskStatus.PENDING, due_date=now - timedelta(days=1)))
        await store.create(build_task(status=TaskStatus.PENDING, due_date=now + timedelta(days=1)))
        await store.create(build_task(status=TaskStatus.PENDING))
        await store.create(build_task(status=TaskStatus.COMPLETED, due_date=now - timedelta(days=5)))

        stats = await task_service.get_stats(store=store, now=now)

        assert stats.total == 4
        assert stats.completed == 1
        assert stats.pending == 3
        assert stats.overdue == 1

    async def test_due_exactly_now_is_not_overdue(self, store: InMemoryTaskStore) -> None:
        await store.create(build_task(due_date=BASE_TIME))

        stats = await task_service.get_stats(store=store, now=BASE_TIME)

        assert stats.overdue == 0
