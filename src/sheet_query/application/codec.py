"""Conversion between raw body rows and schema-keyed records.

Values are carried through unchanged; no type coercion happens here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sheet_query.application.header import ColumnIndexMap
from sheet_query.models.schema import Record, TableSchema


def decode(
    body_rows: Iterable[Sequence[Any]],
    column_indices: ColumnIndexMap,
    schema: TableSchema,
) -> list[Record]:
    return [
        {name: row[column_indices[name]] for name in schema.column_names}
        for row in body_rows
    ]


def encode(
    records: Iterable[Mapping[str, Any]],
    schema: TableSchema,
    column_indices: ColumnIndexMap | None = None,
) -> list[list[Any]]:
    """Turn records back into rows.

    Without ``column_indices`` values are emitted in schema column order.
    With them, each value lands at its header position so the rows line up
    with the sheet's physical columns.
    """

    names = schema.column_names
    if column_indices is None:
        return [[record[name] for name in names] for record in records]

    width = max(column_indices.values(), default=-1) + 1
    rows: list[list[Any]] = []
    for record in records:
        row: list[Any] = [None] * width
        for name in names:
            row[column_indices[name]] = record[name]
        rows.append(row)
    return rows


__all__ = ["decode", "encode"]
