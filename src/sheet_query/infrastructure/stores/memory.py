from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sheet_query.infrastructure.stores.base import HEADER_ROW, trim_blank_rows
from sheet_query.models.errors import StoreError, TableNotFoundError
from sheet_query.models.table import RawTable


class MemoryStore:
    """In-process table store.

    Each table is held as a grid of rows (header first). Writes pad the grid
    as needed and trailing blank rows are trimmed afterwards.
    """

    def __init__(self, tables: Iterable[RawTable] = ()) -> None:
        self._grids: dict[int, list[list[Any]]] = {}
        for table in tables:
            self.add_table(table.id, table.header_row, table.body_rows)

    def add_table(self, table_id: int, header_row: Sequence[Any], body_rows: Iterable[Sequence[Any]] = ()) -> None:
        if table_id in self._grids:
            raise StoreError(f"Table {table_id} already exists")
        self._grids[table_id] = [list(header_row), *(list(row) for row in body_rows)]

    def list_tables(self) -> list[RawTable]:
        tables: list[RawTable] = []
        for table_id, grid in self._grids.items():
            header = grid[0] if grid else []
            width = len(header)
            body = [(row + [None] * width)[:width] for row in grid[1:]]
            tables.append(RawTable(id=table_id, header_row=tuple(header), body_rows=tuple(map(tuple, body))))
        return tables

    def write_rows(self, table_id: int, start_row: int, rows: Sequence[Sequence[Any]]) -> None:
        if start_row < HEADER_ROW:
            raise StoreError(f"Row numbers start at {HEADER_ROW}, got {start_row}")
        grid = self._grids.get(table_id)
        if grid is None:
            raise TableNotFoundError(table_id)

        for offset, row in enumerate(rows):
            index = start_row - 1 + offset
            while len(grid) <= index:
                grid.append([])
            current = grid[index]
            if len(current) < len(row):
                current.extend([None] * (len(row) - len(current)))
            current[: len(row)] = list(row)

        self._grids[table_id] = [grid[0], *trim_blank_rows(grid[1:])] if grid else grid

    def table(self, table_id: int) -> RawTable:
        for table in self.list_tables():
            if table.id == table_id:
                return table
        raise TableNotFoundError(table_id)


__all__ = ["MemoryStore"]
