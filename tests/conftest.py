# tests/conftest.py

from __future__ import annotations

import pytest

from task_api.db import TaskGateway

from .fakes import FakeClock, FakeTable


@pytest.fixture()
def table() -> FakeTable:
    return FakeTable()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def gateway(table: FakeTable, clock: FakeClock) -> TaskGateway:
    """Gateway over the in-memory table; ids are real uuid4 values."""
    return TaskGateway(table, clock=clock)
