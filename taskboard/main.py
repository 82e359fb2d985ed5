"""taskboard REST API: task CRUD, toggling and statistics under /api."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.core.config import constants, settings
from taskboard.core.db_client import close_connection, init_db
from taskboard.core.logging import configure_logfire, instrument_fastapi
from taskboard.core.scheduler import start_scheduler, stop_scheduler
from taskboard.interface.error_handlers import register_error_handlers
from taskboard.interface.tasks_router import router as tasks_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logfire()
    await init_db()
    logger.info("Database ready", extra={"db_path": settings.database_path})
    start_scheduler()
    try:
        yield
    finally:
        stop_scheduler()
        await close_connection()


app = FastAPI(
    title=constants.SERVICE_NAME,
    description="Task management REST API",
    version=constants.SERVICE_VERSION,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None,
    lifespan=lifespan,
)
instrument_fastapi(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)
app.include_router(tasks_router)


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    return {"status": "OK", "message": "Task Management API is running"}


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    logger.info("Starting API server", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(app, host=settings.host, port=settings.port)
