"""AWS Lambda handlers for API Gateway proxy events."""

import base64
import json
import logging
from typing import Any, Callable

from pydantic import ValidationError

from . import cases
from .cases import Failure, Outcome, Success
from .config import get_settings
from .db import TaskGateway, get_table
from .errors import INTERNAL_ERROR
from .logging_setup import setup_logging
from .models import TaskCreate, TaskPath, TaskUpdate
from .responses import error_body, extract_trace_id, lambda_response

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

GatewayFactory = Callable[[], TaskGateway]


class InvalidBodyError(ValueError):
    """Request body is not a JSON object."""


def default_gateway() -> TaskGateway:
    """A fresh gateway per request over the process-wide table resource."""
    return TaskGateway(get_table())


# =============================================================================
# Event parsing
# =============================================================================


def parse_body(event: dict) -> dict:
    body = event.get("body")
    if body is None or body == "":
        return {}
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise InvalidBodyError("body must be a JSON object") from e
    if not isinstance(parsed, dict):
        raise InvalidBodyError("body must be a JSON object")
    return parsed


def parse_path(event: dict) -> str:
    return TaskPath.model_validate(event.get("pathParameters") or {}).task_id


def trace_identifier(event: dict) -> str:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    return extract_trace_id(headers.get("x-amzn-trace-id"))


# =============================================================================
# Outcome -> response
# =============================================================================


def to_response(outcome: Outcome, success_status: int = 200) -> dict:
    match outcome:
        case Success(body=body):
            return lambda_response(success_status, body)
        case Failure(code=code, message=message, status_code=status):
            return lambda_response(status, error_body(code, message, status))
    raise TypeError(f"unexpected outcome {outcome!r}")


def _handle(
    event: dict,
    name: str,
    run: Callable[[str], Outcome],
    success_status: int = 200,
) -> dict:
    try:
        outcome = run(trace_identifier(event))
    except ValidationError as e:
        outcome = Failure.from_validation_error(e)
    except InvalidBodyError as e:
        outcome = Failure.from_invalid_body(str(e))
    except Exception:
        logger.exception("Unhandled error in %s", name)
        return lambda_response(
            INTERNAL_ERROR["http_code"],
            error_body(
                INTERNAL_ERROR["code"], INTERNAL_ERROR["message"], INTERNAL_ERROR["http_code"]
            ),
        )

    if isinstance(outcome, Failure):
        logger.info("%s failed: %s %s", name, outcome.status_code, outcome.code)
    return to_response(outcome, success_status)


# =============================================================================
# Handlers
# =============================================================================


def get_all_tasks_handler(
    event: dict, context: Any = None, gateway_factory: GatewayFactory = default_gateway
) -> dict:
    """GET /tasks"""
    return _handle(
        event,
        "get_all_tasks",
        lambda identifier: cases.list_tasks(gateway_factory(), identifier),
    )


def get_task_by_id_handler(
    event: dict, context: Any = None, gateway_factory: GatewayFactory = default_gateway
) -> dict:
    """GET /tasks/{id}"""

    def run(identifier: str) -> Outcome:
        task_id = parse_path(event)
        return cases.get_task(gateway_factory(), task_id, identifier)

    return _handle(event, "get_task_by_id", run)


def create_task_handler(
    event: dict, context: Any = None, gateway_factory: GatewayFactory = default_gateway
) -> dict:
    """POST /tasks"""

    def run(identifier: str) -> Outcome:
        dto = TaskCreate.model_validate(parse_body(event))
        return cases.create_task(gateway_factory(), dto, identifier)

    return _handle(event, "create_task", run, success_status=201)


def update_task_handler(
    event: dict, context: Any = None, gateway_factory: GatewayFactory = default_gateway
) -> dict:
    """PATCH /tasks/{id}"""

    def run(identifier: str) -> Outcome:
        task_id = parse_path(event)
        dto = TaskUpdate.model_validate(parse_body(event))
        return cases.update_task(gateway_factory(), task_id, dto, identifier)

    return _handle(event, "update_task", run)


def delete_task_handler(
    event: dict, context: Any = None, gateway_factory: GatewayFactory = default_gateway
) -> dict:
    """DELETE /tasks/{id}"""

    def run(identifier: str) -> Outcome:
        task_id = parse_path(event)
        return cases.delete_task(gateway_factory(), task_id, identifier)

    return _handle(event, "delete_task", run)
