"""Database package."""

from .client import ensure_table, get_table
from .gateway import TaskGateway, build_update_expression

__all__ = [
    "ensure_table",
    "get_table",
    "TaskGateway",
    "build_update_expression",
]
