"""View-state for the task pages: an immutable container and pure transitions.

``reduce(state, action)`` never mutates its input and performs no I/O, so
every transition can be tested on its own. TaskViewStore drives it.
"""

from dataclasses import dataclass, field, replace

from taskboard.domain.task import Task, TaskFilters, TaskStats


@dataclass(frozen=True)
class TaskViewState:
    """Everything the task pages render from."""

    tasks: tuple[Task, ...] = ()
    stats: TaskStats | None = None
    loading: bool = False
    error: str | None = None
    filters: TaskFilters = field(default_factory=TaskFilters)


@dataclass(frozen=True)
class RefreshStarted:
    pass


@dataclass(frozen=True)
class RefreshSucceeded:
    tasks: tuple[Task, ...]
    stats: TaskStats


@dataclass(frozen=True)
class RefreshFailed:
    error: str


@dataclass(frozen=True)
class MutationStarted:
    pass


@dataclass(frozen=True)
class TaskCreated:
    task: Task


@dataclass(frozen=True)
class TaskReplaced:
    """An update or toggle returned a new version of a task."""

    task: Task


@dataclass(frozen=True)
class TaskRemoved:
    task_id: str


@dataclass(frozen=True)
class StatsLoaded:
    stats: TaskStats


@dataclass(frozen=True)
class ActionFailed:
    error: str


@dataclass(frozen=True)
class FiltersChanged:
    filters: TaskFilters


Action = (
    RefreshStarted
    | RefreshSucceeded
    | RefreshFailed
    | MutationStarted
    | TaskCreated
    | TaskReplaced
    | TaskRemoved
    | StatsLoaded
    | ActionFailed
    | FiltersChanged
)


def reduce(state: TaskViewState, action: Action) -> TaskViewState:  # noqa: PLR0911
    """Return the state that results from applying ``action``."""
    match action:
        case RefreshStarted():
            return replace(state, loading=True, error=None)
        case RefreshSucceeded(tasks=tasks, stats=stats):
            # List and stats are replaced together or not at all
            return replace(state, tasks=tuple(tasks), stats=stats, loading=False)
        case RefreshFailed(error=error):
            return replace(state, loading=False, error=error)
        case MutationStarted():
            return replace(state, error=None)
        case TaskCreated(task=task):
            return replace(state, tasks=(task, *state.tasks))
        case TaskReplaced(task=task):
            return replace(state, tasks=tuple(task if t.id == task.id else t for t in state.tasks))
        case TaskRemoved(task_id=task_id):
            return replace(state, tasks=tuple(t for t in state.tasks if t.id != task_id))
        case StatsLoaded(stats=stats):
            return replace(state, stats=stats)
        case ActionFailed(error=error):
            return replace(state, error=error)
        case FiltersChanged(filters=filters):
            return replace(state, filters=filters)
    msg = f"Unknown action: {action!r}"
    raise TypeError(msg)
