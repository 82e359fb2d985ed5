"""Error taxonomy shared by the store, the service layer and the HTTP boundary."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(Enum):
    """Error codes for specific error conditions."""

    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_STORE_FAILURE = "ERR_STORE_FAILURE"


class ErrorResponse(BaseModel):
    """Error body returned by every failing API call."""

    error: str


class TaskboardError(Exception):
    """Base class for errors that map onto an HTTP response."""

    code: ErrorCode = ErrorCode.ERR_VALIDATION
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    """Malformed or missing required input."""

    code = ErrorCode.ERR_VALIDATION
    status_code = 400


class NotFoundError(TaskboardError):
    """No task exists for the requested id."""

    code = ErrorCode.ERR_TASK_NOT_FOUND
    status_code = 404

    def __init__(self, message: str = "Task not found") -> None:
        super().__init__(message)


class StoreError(TaskboardError):
    """The underlying persistence layer failed.

    The message is for logs only; callers receive a generic message instead.
    """

    code = ErrorCode.ERR_STORE_FAILURE
    status_code = 500
