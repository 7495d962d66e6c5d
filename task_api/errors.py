"""Error taxonomy and the response codes attached to each kind."""

from __future__ import annotations

from enum import Enum

from botocore.exceptions import BotoCoreError, ClientError

STORE_ERRORS = (ClientError, BotoCoreError)

SUCCESSFUL_OPERATION = {
    "http_code": 200,
    "code": "SUCCESSFUL_OPERATION",
    "message": "The request has been successful.",
}

BAD_REQUEST = {"http_code": 400, "code": "BAD_REQUEST", "message": "Bad request"}
NOT_FOUND = {
    "http_code": 404,
    "code": "RESOURCE_NOT_FOUND",
    "message": "Resource Not Found",
}
INTERNAL_ERROR = {"http_code": 500, "code": "INTERNAL_ERROR", "message": "Internal error"}


class ErrorKind(str, Enum):
    """Discriminator carried by every failed operation."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORE = "store"


class TaskApiError(Exception):
    """Base class for errors raised inside the task API."""

    kind: ErrorKind = ErrorKind.STORE
    code: str = INTERNAL_ERROR["code"]
    status_code: int = INTERNAL_ERROR["http_code"]

    def __init__(self, message: str | None = None) -> None:
        self.message = message or INTERNAL_ERROR["message"]
        super().__init__(self.message)


class TaskNotFoundError(TaskApiError):
    """No stored record matches the requested task id."""

    kind = ErrorKind.NOT_FOUND
    code = NOT_FOUND["code"]
    status_code = NOT_FOUND["http_code"]

    def __init__(self, task_id: str | None = None) -> None:
        self.task_id = task_id
        super().__init__(NOT_FOUND["message"])


def store_error_status(error: Exception) -> int:
    """HTTP status reported by the store for `error`, or 500."""
    if isinstance(error, ClientError):
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if isinstance(status, int) and status >= 400:
            return status
    return INTERNAL_ERROR["http_code"]


def is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"
