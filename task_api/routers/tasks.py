"""Task API router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError

from .. import cases
from ..cases import Failure, Outcome, Success
from ..db import TaskGateway, get_table
from ..models import ErrorResponse, SuccessResponse, TaskCreate, TaskUpdate
from ..responses import error_body, extract_trace_id, to_json

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


# =============================================================================
# Dependencies
# =============================================================================


def get_gateway() -> TaskGateway:
    """A fresh gateway per request."""
    return TaskGateway(get_table())


def get_identifier(request: Request) -> str:
    return extract_trace_id(request.headers.get("x-amzn-trace-id"))


# =============================================================================
# Helper Functions
# =============================================================================


def render(outcome: Outcome, success_status: int = status.HTTP_200_OK) -> Response:
    """Map a use-case outcome to a JSON response."""
    if isinstance(outcome, Success):
        body, status_code = outcome.body, success_status
    else:
        body = error_body(outcome.code, outcome.message, outcome.status_code)
        status_code = outcome.status_code
    return Response(
        content=to_json(body),
        status_code=status_code,
        media_type="application/json",
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> Response:
    """Report request validation errors as 400 with the shared error body."""
    return render(Failure.from_validation_error(exc))


# =============================================================================
# REST API Endpoints (JSON)
# =============================================================================


@router.get("", response_model=SuccessResponse, responses=ERROR_RESPONSES)
def list_tasks(
    gateway: TaskGateway = Depends(get_gateway),
    identifier: str = Depends(get_identifier),
):
    """Get all tasks."""
    return render(cases.list_tasks(gateway, identifier))


@router.get("/{task_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
def get_task(
    task_id: UUID,
    gateway: TaskGateway = Depends(get_gateway),
    identifier: str = Depends(get_identifier),
):
    """Get the tasks stored under an id."""
    return render(cases.get_task(gateway, str(task_id), identifier))


@router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_task_endpoint(
    task_data: TaskCreate,
    gateway: TaskGateway = Depends(get_gateway),
    identifier: str = Depends(get_identifier),
):
    """Create a new task."""
    return render(
        cases.create_task(gateway, task_data, identifier),
        success_status=status.HTTP_201_CREATED,
    )


@router.patch("/{task_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
def update_task_endpoint(
    task_id: UUID,
    task_data: TaskUpdate,
    gateway: TaskGateway = Depends(get_gateway),
    identifier: str = Depends(get_identifier),
):
    """Update the supplied fields of a task."""
    return render(cases.update_task(gateway, str(task_id), task_data, identifier))


@router.delete("/{task_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
def delete_task_endpoint(
    task_id: UUID,
    gateway: TaskGateway = Depends(get_gateway),
    identifier: str = Depends(get_identifier),
):
    """Delete a task."""
    return render(cases.delete_task(gateway, str(task_id), identifier))
