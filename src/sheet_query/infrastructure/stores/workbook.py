"""openpyxl-backed table store over a single ``.xlsx`` file."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from contextlib import suppress
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import openpyxl
from openpyxl import Workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from sheet_query.infrastructure.stores.base import HEADER_ROW, trim_blank_rows
from sheet_query.models.errors import StoreError, TableNotFoundError
from sheet_query.models.table import RawTable


def _header_width(values: Sequence[Any]) -> int:
    width = len(values)
    while width and (values[width - 1] is None or values[width - 1] == ""):
        width -= 1
    return width


def read_raw_table(table_id: int, worksheet: Worksheet) -> RawTable:
    """Read a worksheet's header + body, trimmed to its used extent."""

    rows = [list(row) for row in worksheet.iter_rows(values_only=True)]
    if not rows:
        return RawTable(id=table_id, header_row=(), body_rows=())

    header = rows[0][: _header_width(rows[0])]
    width = len(header)
    body = trim_blank_rows([(row + [None] * width)[:width] for row in rows[1:]])
    return RawTable(id=table_id, header_row=tuple(header), body_rows=tuple(map(tuple, body)))


class WorkbookStore:
    """Tables are worksheets of one workbook.

    A worksheet's id is its position in the workbook unless ``sheet_ids``
    maps ids to worksheet titles. The file is reloaded by every
    ``list_tables`` call and saved after every ``write_rows`` call.
    """

    def __init__(self, path: Path | str, *, sheet_ids: Mapping[int, str] | None = None) -> None:
        self.path = Path(path)
        self.sheet_ids = dict(sheet_ids) if sheet_ids is not None else None
        self._workbook: Workbook | None = None

    def _load(self) -> Workbook:
        if not self.path.is_file():
            raise StoreError(f"Workbook not found: {self.path}")
        try:
            workbook = openpyxl.load_workbook(filename=self.path)
        except (BadZipFile, InvalidFileException, KeyError, OSError) as exc:
            raise StoreError(f"Failed to open workbook {self.path}: {exc}") from exc
        self.close()
        self._workbook = workbook
        return workbook

    def _worksheets(self, workbook: Workbook) -> dict[int, Worksheet]:
        if self.sheet_ids is None:
            return dict(enumerate(workbook.worksheets))

        sheets: dict[int, Worksheet] = {}
        for table_id, title in self.sheet_ids.items():
            if title in workbook.sheetnames:
                sheets[table_id] = workbook[title]
        return sheets

    def list_tables(self) -> list[RawTable]:
        workbook = self._load()
        return [read_raw_table(table_id, ws) for table_id, ws in self._worksheets(workbook).items()]

    def write_rows(self, table_id: int, start_row: int, rows: Sequence[Sequence[Any]]) -> None:
        if start_row < HEADER_ROW:
            raise StoreError(f"Row numbers start at {HEADER_ROW}, got {start_row}")
        workbook = self._workbook if self._workbook is not None else self._load()
        worksheet = self._worksheets(workbook).get(table_id)
        if worksheet is None:
            raise TableNotFoundError(table_id)

        for offset, row in enumerate(rows):
            for col_offset, value in enumerate(row):
                # cell(value=None) leaves the old value in place; clearing needs the assignment.
                worksheet.cell(row=start_row + offset, column=col_offset + 1).value = value

        try:
            workbook.save(self.path)
        except OSError as exc:
            raise StoreError(f"Failed to save workbook {self.path}: {exc}") from exc

    def close(self) -> None:
        if self._workbook is not None:
            with suppress(Exception):
                self._workbook.close()
            self._workbook = None


__all__ = ["WorkbookStore", "read_raw_table"]
