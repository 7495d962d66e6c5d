"""Models package."""

from .response import ErrorResponse, SuccessResponse
from .task import (
    KEY_ATTRIBUTES,
    Task,
    TaskCreate,
    TaskPath,
    TaskStatus,
    TaskUpdate,
)

__all__ = [
    "KEY_ATTRIBUTES",
    "TaskStatus",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskPath",
    "SuccessResponse",
    "ErrorResponse",
]
