"""Use-case package."""

from .tasks import (
    Failure,
    Outcome,
    Success,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)

__all__ = [
    "Success",
    "Failure",
    "Outcome",
    "list_tasks",
    "get_task",
    "create_task",
    "update_task",
    "delete_task",
]
