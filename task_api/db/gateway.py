"""Storage gateway translating task operations into DynamoDB calls."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from botocore.exceptions import ClientError

from ..errors import TaskNotFoundError, is_conditional_check_failure
from ..models import KEY_ATTRIBUTES, Task, TaskCreate, TaskStatus, TaskUpdate

logger = logging.getLogger(__name__)

# Mutations only apply to an item that still exists; otherwise
# update_item would create a new item from the SET clause alone.
ITEM_EXISTS_CONDITION = "attribute_exists(task_id)"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a trailing Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_update_expression(changes: Mapping[str, Any], updated_at: str) -> dict[str, Any]:
    """
    Build the SET clause for a partial update.

    ``updated_at`` is always written. Every other entry of ``changes``
    is written as given, including falsy values and None; key attributes
    are never written.
    """
    clauses = ["#updated_at = :updated_at"]
    names = {"#updated_at": "updated_at"}
    values: dict[str, Any] = {":updated_at": updated_at}

    for key, value in changes.items():
        if key in KEY_ATTRIBUTES or key == "updated_at":
            continue
        clauses.append(f"#{key} = :{key}")
        names[f"#{key}"] = key
        values[f":{key}"] = value

    return {
        "UpdateExpression": "SET " + ", ".join(clauses),
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
    }


class TaskGateway:
    """
    Task storage over a table keyed by ``task_id`` (partition) and
    ``created_at`` (sort).

    Callers only know the task id, so update and delete look the item up
    first to learn its sort key, then mutate by the full key. The two
    calls are not atomic; the mutation is conditioned on the item still
    existing, and a miss there is reported as not found.
    """

    def __init__(
        self,
        table,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._table = table
        self._clock = clock
        self._id_factory = id_factory

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def find_all(self) -> list[Task]:
        """Return every stored task, unordered."""
        logger.debug("scan table=%s", self._table.name)
        response = self._table.scan()
        return [Task.model_validate(item) for item in response.get("Items", [])]

    def find_by_id(self, task_id: str) -> list[Task] | None:
        """Return all items stored under ``task_id``, or None when there are none."""
        logger.debug("query table=%s task_id=%s", self._table.name, task_id)
        response = self._table.query(
            KeyConditionExpression="task_id = :task_id",
            ExpressionAttributeValues={":task_id": task_id},
        )
        items = response.get("Items") or []
        if not items:
            return None
        return [Task.model_validate(item) for item in items]

    def create(self, dto: TaskCreate) -> Task:
        """Write a new task with a fresh id and default optional fields."""
        now = self._now()
        task = Task(
            task_id=self._id_factory(),
            title=dto.title,
            description=dto.description,
            status=dto.status or TaskStatus.PENDING,
            tags=dto.tags if dto.tags is not None else [],
            due_date=dto.due_date_iso(),
            estimated_time=dto.estimated_time if dto.estimated_time is not None else 0,
            is_high_priority=bool(dto.is_high_priority),
            created_at=now,
            updated_at=now,
        )
        self._table.put_item(Item=task.to_item())
        logger.info("Created task %s", task.task_id)
        return task

    def _resolve(self, task_id: str) -> Task:
        existing = self.find_by_id(task_id)
        if not existing:
            raise TaskNotFoundError(task_id)
        return existing[0]

    def update(self, task_id: str, dto: TaskUpdate) -> Task:
        """Apply the supplied fields of ``dto`` to the stored task."""
        existing = self._resolve(task_id)
        expression = build_update_expression(dto.changes(), self._now())

        try:
            response = self._table.update_item(
                Key={"task_id": task_id, "created_at": existing.created_at},
                ConditionExpression=ITEM_EXISTS_CONDITION,
                ReturnValues="ALL_NEW",
                **expression,
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise TaskNotFoundError(task_id) from e
            raise

        logger.info(
            "Updated task %s fields=%s",
            task_id,
            sorted(expression["ExpressionAttributeNames"].values()),
        )
        return Task.model_validate(response["Attributes"])

    def delete(self, task_id: str) -> bool:
        """Remove the stored task."""
        existing = self._resolve(task_id)

        try:
            self._table.delete_item(
                Key={"task_id": task_id, "created_at": existing.created_at},
                ConditionExpression=ITEM_EXISTS_CONDITION,
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                raise TaskNotFoundError(task_id) from e
            raise

        logger.info("Deleted task %s", task_id)
        return True
