"""Pydantic Logfire setup shared by the API and the web frontend.

Modules log through ``logging.getLogger(__name__)`` with structured fields in
``extra``. Logfire exports spans and logs only when LOGFIRE_TOKEN is set;
without a token everything still runs and logs stay local.
"""

import logging

import logfire
from fastapi import FastAPI

from taskboard.core.config import constants, settings


logger = logging.getLogger(__name__)


def configure_logfire(*, service_name: str = constants.SERVICE_NAME) -> None:
    """Configure Logfire for one process (API or web frontend)."""
    logfire.configure(
        token=settings.logfire_token,
        service_name=service_name,
        service_version=constants.SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logger.info("logfire_configured", extra={"service_name": service_name, "environment": settings.environment})


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by ``app``."""
    logfire.instrument_fastapi(app)
    logger.debug("fastapi_instrumented", extra={"app_title": app.title})


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Open a span around a task operation.

    Usage:
        with span("task_service.toggle_task", task_id=task_id):
            ...
    """
    return logfire.span(name, **attributes)
