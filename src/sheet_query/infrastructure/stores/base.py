from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from sheet_query.models.table import RawTable

HEADER_ROW = 1
FIRST_BODY_ROW = 2


def is_blank_row(row: Sequence[Any]) -> bool:
    return all(value is None or value == "" for value in row)


def trim_blank_rows(rows: list[list[Any]]) -> list[list[Any]]:
    """Drop trailing rows with no values, like a sheet's data range does."""

    end = len(rows)
    while end and is_blank_row(rows[end - 1]):
        end -= 1
    return rows[:end]


@runtime_checkable
class TableStore(Protocol):
    """Backing store of tables addressed by integer id.

    Rows are 1-based: the header is row 1 and the first record is row 2.
    Stores never create or delete tables; they only rewrite row ranges.
    """

    def list_tables(self) -> list[RawTable]: ...

    def write_rows(self, table_id: int, start_row: int, rows: Sequence[Sequence[Any]]) -> None: ...


__all__ = ["FIRST_BODY_ROW", "HEADER_ROW", "TableStore", "is_blank_row", "trim_blank_rows"]
