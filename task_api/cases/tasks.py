"""Task use-cases: one function per operation, orchestrating the gateway."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from pydantic import ValidationError

from ..db import TaskGateway
from ..errors import (
    BAD_REQUEST,
    INTERNAL_ERROR,
    STORE_ERRORS,
    ErrorKind,
    TaskApiError,
    TaskNotFoundError,
    store_error_status,
)
from ..models import SuccessResponse, TaskCreate, TaskUpdate
from ..responses import success

if TYPE_CHECKING:
    from fastapi.exceptions import RequestValidationError

logger = logging.getLogger(__name__)

REQUEST_SECTIONS = frozenset({"body", "path", "query"})


@dataclass(frozen=True, slots=True)
class Success:
    body: SuccessResponse


@dataclass(frozen=True, slots=True)
class Failure:
    kind: ErrorKind
    code: str
    message: str
    status_code: int

    @classmethod
    def from_error(cls, error: TaskApiError) -> Failure:
        return cls(error.kind, error.code, error.message, error.status_code)

    @classmethod
    def from_validation_error(cls, error: ValidationError | RequestValidationError) -> Failure:
        details = []
        for err in error.errors():
            # FastAPI prefixes the location with where the value came from.
            loc = ".".join(str(p) for p in err.get("loc", ()) if p not in REQUEST_SECTIONS)
            details.append(f'"{loc}" {err["msg"]}' if loc else err["msg"])
        return cls(
            ErrorKind.VALIDATION,
            BAD_REQUEST["code"],
            "Invalid request: " + ", ".join(details),
            BAD_REQUEST["http_code"],
        )

    @classmethod
    def from_invalid_body(cls, reason: str) -> Failure:
        return cls(
            ErrorKind.VALIDATION,
            BAD_REQUEST["code"],
            f"Invalid request: {reason}",
            BAD_REQUEST["http_code"],
        )

    @classmethod
    def from_store_error(cls, error: Exception) -> Failure:
        status = store_error_status(error)
        if status == INTERNAL_ERROR["http_code"]:
            return cls(ErrorKind.STORE, INTERNAL_ERROR["code"], INTERNAL_ERROR["message"], status)
        detail = getattr(error, "response", {}).get("Error", {})
        return cls(
            ErrorKind.STORE,
            detail.get("Code") or INTERNAL_ERROR["code"],
            detail.get("Message") or INTERNAL_ERROR["message"],
            status,
        )


Outcome = Success | Failure


def _run(operation: Callable[[], Any], identifier: str) -> Outcome:
    """Run a gateway operation, turning known errors into a Failure."""
    try:
        data = operation()
    except TaskApiError as e:
        logger.info("%s: %s", e.code, e.message)
        return Failure.from_error(e)
    except STORE_ERRORS as e:
        logger.warning("Store call failed: %s", e)
        return Failure.from_store_error(e)
    return Success(success(identifier, data))


def list_tasks(gateway: TaskGateway, identifier: str = "") -> Outcome:
    return _run(gateway.find_all, identifier)


def get_task(gateway: TaskGateway, task_id: str, identifier: str = "") -> Outcome:
    def operation():
        tasks = gateway.find_by_id(task_id)
        if not tasks:
            raise TaskNotFoundError(task_id)
        return tasks

    return _run(operation, identifier)


def create_task(gateway: TaskGateway, dto: TaskCreate, identifier: str = "") -> Outcome:
    return _run(lambda: gateway.create(dto), identifier)


def update_task(
    gateway: TaskGateway, task_id: str, dto: TaskUpdate, identifier: str = ""
) -> Outcome:
    return _run(lambda: gateway.update(task_id, dto), identifier)


def delete_task(gateway: TaskGateway, task_id: str, identifier: str = "") -> Outcome:
    return _run(lambda: gateway.delete(task_id), identifier)
