"""Server-rendered task pages."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Form, Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from taskboard.client.task_client import TaskClient
from taskboard.core.config import constants
from taskboard.domain.task import TaskPriority
from taskboard.web import components
from taskboard.web.components import TaskForm
from taskboard.web.state import ActionFailed
from taskboard.web.view_store import TaskViewStore


logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=str(constants.TEMPLATES_DIR))
templates.env.globals.update(
    due_state=components.due_state,
    due_label=components.due_label,
    format_date=components.format_date,
    priority_tone=components.PRIORITY_TONES.get,
)


def get_task_client(request: Request) -> TaskClient:
    """The TaskClient opened by the web app's lifespan."""
    return request.app.state.task_client


def get_view_store(request: Request, client: TaskClient = Depends(get_task_client)) -> TaskViewStore:
    """A fresh view store per request, seeded with the filters in the query string."""
    return TaskViewStore(client, components.filters_from_query(request.query_params))


def _back_to_index(store: TaskViewStore) -> RedirectResponse:
    query = components.query_string(store.state.filters)
    return RedirectResponse(url=f"/?{query}", status_code=status.HTTP_303_SEE_OTHER)


def _render_index(request: Request, store: TaskViewStore) -> Response:
    state = store.state
    filters = state.filters
    return templates.TemplateResponse(
        request,
        name="tasks/index.html",
        context={
            "state": state,
            "filters": filters,
            "now": datetime.now(UTC),
            "stats": components.stats_items(state.stats) if state.stats is not None else [],
            "status_options": components.STATUS_OPTIONS,
            "priority_options": components.PRIORITY_OPTIONS,
            "sort_options": components.SORT_OPTIONS,
            "query": components.query_string(filters),
            "order_toggle_query": components.query_string(
                filters, order=components.toggled_order(filters.order).value
            ),
            "empty_message": components.empty_state_message(filters),
        },
    )


async def _render_index_with_error(request: Request, store: TaskViewStore) -> Response:
    """Reload the page data but keep the error of the action that just failed."""
    message = store.state.error
    await store.refresh()
    if message and store.state.error is None:
        store.dispatch(ActionFailed(message))
    return _render_index(request, store)


def _render_form(
    request: Request,
    store: TaskViewStore,
    *,
    form: TaskForm,
    task_id: str | None = None,
    errors: dict[str, str] | None = None,
) -> Response:
    return templates.TemplateResponse(
        request,
        name="tasks/form.html",
        context={
            "form": form,
            "task_id": task_id,
            "errors": errors or {},
            "error": store.state.error,
            "priority_options": components.PRIORITY_OPTIONS[1:],
            "query": components.query_string(store.state.filters),
        },
    )


def _form_from_fields(title: str, description: str, priority: str, due_date: str) -> TaskForm:
    try:
        parsed_priority = TaskPriority(priority)
    except ValueError:
        parsed_priority = TaskPriority.MEDIUM
    return TaskForm(title=title, description=description, priority=parsed_priority, due_date=due_date)


@router.get("/")
async def get_index(request: Request, store: TaskViewStore = Depends(get_view_store)) -> Response:
    """Render stats, the filter panel and the task list."""
    await store.refresh()
    return _render_index(request, store)


@router.get("/tasks/new")
async def get_new_task(request: Request, store: TaskViewStore = Depends(get_view_store)) -> Response:
    """Render an empty create form."""
    return _render_form(request, store, form=TaskForm())


@router.post("/tasks")
async def post_new_task(
    *,
    request: Request,
    store: TaskViewStore = Depends(get_view_store),
    title: str = Form(""),
    description: str = Form(""),
    priority: str = Form(TaskPriority.MEDIUM.value),
    due_date: str = Form(""),
) -> Response:
    """Validate the form and create the task; invalid input never reaches the API."""
    form = _form_from_fields(title, description, priority, due_date)
    errors = components.validate_task_form(form)
    if errors:
        return _render_form(request, store, form=form, errors=errors)

    task = await store.create_task(components.form_to_create(form))
    if task is None:
        return _render_form(request, store, form=form)

    logger.info("task_created_from_form", extra={"task_id": task.id})
    return _back_to_index(store)


@router.get("/tasks/{task_id}/edit")
async def get_edit_task(*, request: Request, store: TaskViewStore = Depends(get_view_store), task_id: str) -> Response:
    """Render the edit form pre-filled from the task."""
    task = await store.get_task(task_id)
    if task is None:
        return await _render_index_with_error(request, store)
    return _render_form(request, store, form=components.form_from_task(task), task_id=task.id)


@router.post("/tasks/{task_id}")
async def post_edit_task(
    *,
    request: Request,
    store: TaskViewStore = Depends(get_view_store),
    task_id: str,
    title: str = Form(""),
    description: str = Form(""),
    priority: str = Form(TaskPriority.MEDIUM.value),
    due_date: str = Form(""),
) -> Response:
    """Validate the form and save every field of the task."""
    form = _form_from_fields(title, description, priority, due_date)
    errors = components.validate_task_form(form)
    if errors:
        return _render_form(request, store, form=form, task_id=task_id, errors=errors)

    task = await store.update_task(task_id, components.form_to_update(form))
    if task is None:
        return _render_form(request, store, form=form, task_id=task_id)

    logger.info("task_updated_from_form", extra={"task_id": task.id})
    return _back_to_index(store)


@router.post("/tasks/{task_id}/toggle")
async def post_toggle_task(
    *, request: Request, store: TaskViewStore = Depends(get_view_store), task_id: str
) -> Response:
    """Flip a task between pending and completed."""
    task = await store.toggle_task(task_id)
    if task is None:
        return await _render_index_with_error(request, store)
    return _back_to_index(store)


@router.get("/tasks/{task_id}/delete")
async def get_delete_task(
    *, request: Request, store: TaskViewStore = Depends(get_view_store), task_id: str
) -> Response:
    """Ask for confirmation; nothing is deleted here."""
    task = await store.get_task(task_id)
    if task is None:
        return await _render_index_with_error(request, store)
    return templates.TemplateResponse(
        request,
        name="tasks/confirm_delete.html",
        context={"task": task, "query": components.query_string(store.state.filters)},
    )


@router.post("/tasks/{task_id}/delete")
async def post_delete_task(
    *, request: Request, store: TaskViewStore = Depends(get_view_store), task_id: str
) -> Response:
    """Delete the task after confirmation."""
    deleted = await store.delete_task(task_id)
    if not deleted:
        return await _render_index_with_error(request, store)
    logger.info("task_deleted_from_page", extra={"task_id": task_id})
    return _back_to_index(store)
