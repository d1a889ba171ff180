from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from sheet_query.infrastructure.stores.memory import MemoryStore
from sheet_query.models.schema import TableSchema


@dataclass
class WriteCall:
    table_id: int
    start_row: int
    rows: list[list[Any]]


class RecordingStore(MemoryStore):
    """MemoryStore that remembers every write it receives."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.writes: list[WriteCall] = []
        self.list_calls = 0

    def list_tables(self):
        self.list_calls += 1
        return super().list_tables()

    def write_rows(self, table_id: int, start_row: int, rows: Sequence[Sequence[Any]]) -> None:
        self.writes.append(WriteCall(table_id, start_row, [list(r) for r in rows]))
        super().write_rows(table_id, start_row, rows)


@dataclass
class FakeLock:
    """Lock double that grants or refuses and counts calls."""

    grant: bool = True
    acquired: int = 0
    released: int = 0
    timeouts: list[int] = field(default_factory=list)

    def acquire(self, timeout_ms: int) -> bool:
        self.timeouts.append(timeout_ms)
        if self.grant:
            self.acquired += 1
        return self.grant

    def release(self) -> None:
        self.released += 1

    @property
    def held(self) -> bool:
        return self.acquired > self.released


@pytest.fixture
def group_schema() -> TableSchema:
    return TableSchema.of(
        1000,
        [("Group ID", "string"), ("Name", "string"), ("Ave. Grades", "number")],
    )


@pytest.fixture
def user_schema() -> TableSchema:
    return TableSchema.of(
        2000,
        [
            ("User ID", "string"),
            ("Group ID", "string"),
            ("Name", "string"),
            ("Age", "number"),
            ("Is Employed", "boolean"),
        ],
    )


@pytest.fixture
def store() -> RecordingStore:
    store = RecordingStore()
    store.add_table(
        1000,
        ["Group ID", "Name", "Ave. Grades"],
        [["0123", "aaa", 1], ["4567", "bbb", 6]],
    )
    store.add_table(
        2000,
        ["User ID", "Group ID", "Name", "Age", "Is Employed"],
        [["u1", "0123", "Alice", 31, True], ["u2", "4567", "Bob", 27, False]],
    )
    return store


@pytest.fixture
def lock() -> FakeLock:
    return FakeLock()


@pytest.fixture
def empty_store() -> RecordingStore:
    store = RecordingStore()
    store.add_table(1000, ["Group ID", "Name", "Ave. Grades"])
    return store


@pytest.fixture
def refused_lock() -> FakeLock:
    return FakeLock(grant=False)
