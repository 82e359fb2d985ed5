"""taskboard web frontend: server-rendered pages talking to the task API over HTTP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from taskboard.client.task_client import TaskClient
from taskboard.core.config import constants, settings
from taskboard.core.logging import configure_logfire, instrument_fastapi
from taskboard.web.router import router as pages_router


logger = logging.getLogger(__name__)

WEB_SERVICE_NAME = "taskboard-web"


def create_app(client: TaskClient | None = None) -> FastAPI:
    """Build the web app.

    Args:
        client: TaskClient to use instead of one opened against API_BASE_URL.
            A client passed in is not closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logfire(service_name=WEB_SERVICE_NAME)
        owned = client is None
        app.state.task_client = client or TaskClient(settings.api_base_url)
        logger.info("Web frontend started", extra={"api_base_url": settings.api_base_url})
        yield
        if owned:
            await app.state.task_client.aclose()

    app = FastAPI(
        title=WEB_SERVICE_NAME,
        description="Task management web frontend",
        version=constants.SERVICE_VERSION,
        lifespan=lifespan,
    )
    instrument_fastapi(app)
    app.include_router(pages_router)
    return app


app = create_app()


def run() -> None:
    """Serve the web frontend with uvicorn on the configured host and web port."""
    logger.info("Starting web server", extra={"host": settings.host, "port": settings.web_port})
    uvicorn.run(app, host=settings.host, port=settings.web_port)
