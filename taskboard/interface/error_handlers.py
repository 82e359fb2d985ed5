"""Translate exceptions into ``{"error": ...}`` responses at the HTTP boundary."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.core.errors import ErrorResponse, StoreError, TaskboardError


logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def format_validation_error(exc: RequestValidationError) -> str:
    """Build a one-line message from the first request validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"

    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if location:
        return f"Invalid {'.'.join(location)}: {message}"
    return message


async def handle_taskboard_error(request: Request, exc: TaskboardError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("unhandled_store_error", extra={"path": request.url.path, "error": exc.message})
        return _error_response(exc.status_code, GENERIC_ERROR_MESSAGE)
    logger.info(
        "request_rejected",
        extra={"path": request.url.path, "code": exc.code.value, "error": exc.message},
    )
    return _error_response(exc.status_code, exc.message)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_error(exc)
    logger.info("request_validation_failed", extra={"path": request.url.path, "error": message})
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def handle_http_exception(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", extra={"path": request.url.path, "error": str(exc)})
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application."""
    app.add_exception_handler(TaskboardError, handle_taskboard_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
