# tests/fakes.py

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from botocore.exceptions import ClientError

MUTATIONS = frozenset({"put_item", "update_item", "delete_item"})


def client_error(code: str, message: str = "", status: int | None = 400, op: str = "Op") -> ClientError:
    response: dict[str, Any] = {"Error": {"Code": code, "Message": message}}
    if status is not None:
        response["ResponseMetadata"] = {"HTTPStatusCode": status}
    return ClientError(response, op)


def _to_store(value: Any) -> Any:
    """Mimic DynamoDB number handling: ints come back as Decimal."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, list):
        return [_to_store(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_store(v) for k, v in value.items()}
    return value


class FakeTable:
    """
    In-memory stand-in for a boto3 DynamoDB Table keyed by
    (task_id, created_at).

    Understands only the expressions the gateway issues:
    - query: "task_id = :task_id"
    - update: "SET #a = :a, #b = :b"
    - condition: "attribute_exists(task_id)"

    Every call is recorded in ``calls`` as (operation, kwargs).
    """

    name = "task_manager"

    def __init__(self) -> None:
        self.items: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._failures: dict[str, Exception] = {}

    # ---- test helpers ----

    def fail(self, operation: str, error: Exception) -> None:
        """Raise `error` on the next call to `operation`."""
        self._failures[operation] = error

    @property
    def mutation_calls(self) -> list[tuple[str, dict[str, Any]]]:
        return [c for c in self.calls if c[0] in MUTATIONS]

    def _record(self, operation: str, kwargs: dict[str, Any]) -> None:
        self.calls.append((operation, kwargs))
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    @staticmethod
    def _key(key: dict[str, Any]) -> tuple[str, str]:
        return key["task_id"], key["created_at"]

    def _check_exists(self, key: tuple[str, str], condition: str | None, op: str) -> None:
        if condition is None:
            return
        assert condition == "attribute_exists(task_id)", condition
        if key not in self.items:
            raise client_error(
                "ConditionalCheckFailedException", "The conditional request failed", 400, op
            )

    # ---- Table API ----

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        self._record("scan", kwargs)
        return {"Items": [copy.deepcopy(i) for i in self.items.values()]}

    def query(self, **kwargs: Any) -> dict[str, Any]:
        self._record("query", kwargs)
        assert kwargs["KeyConditionExpression"] == "task_id = :task_id"
        task_id = kwargs["ExpressionAttributeValues"][":task_id"]
        matches = sorted(
            (item for key, item in self.items.items() if key[0] == task_id),
            key=lambda i: i["created_at"],
        )
        return {"Items": [copy.deepcopy(i) for i in matches], "Count": len(matches)}

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        self._record("put_item", {"Item": Item, **kwargs})
        self.items[self._key(Item)] = _to_store(copy.deepcopy(Item))
        return {}

    def update_item(
        self,
        *,
        Key: dict[str, Any],
        UpdateExpression: str,
        ExpressionAttributeNames: dict[str, str],
        ExpressionAttributeValues: dict[str, Any],
        ConditionExpression: str | None = None,
        ReturnValues: str = "NONE",
    ) -> dict[str, Any]:
        self._record(
            "update_item",
            {
                "Key": Key,
                "UpdateExpression": UpdateExpression,
                "ExpressionAttributeNames": ExpressionAttributeNames,
                "ExpressionAttributeValues": ExpressionAttributeValues,
                "ConditionExpression": ConditionExpression,
                "ReturnValues": ReturnValues,
            },
        )
        key = self._key(Key)
        self._check_exists(key, ConditionExpression, "UpdateItem")

        assert UpdateExpression.startswith("SET ")
        item = self.items.setdefault(key, dict(Key))
        for clause in UpdateExpression[len("SET ") :].split(", "):
            name_ph, value_ph = clause.split(" = ")
            item[ExpressionAttributeNames[name_ph]] = _to_store(
                copy.deepcopy(ExpressionAttributeValues[value_ph])
            )

        if ReturnValues == "ALL_NEW":
            return {"Attributes": copy.deepcopy(item)}
        return {}

    def delete_item(
        self, *, Key: dict[str, Any], ConditionExpression: str | None = None
    ) -> dict[str, Any]:
        self._record("delete_item", {"Key": Key, "ConditionExpression": ConditionExpression})
        key = self._key(Key)
        self._check_exists(key, ConditionExpression, "DeleteItem")
        self.items.pop(key, None)
        return {}


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 7, 6, 10, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current
