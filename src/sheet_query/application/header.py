"""Header row parsing, validation and column index resolution.

A header cell is either a plain column name (``"Name"``) or a name annotated
with its value type (``"Age <number>"``). Both forms are matched against the
table schema with one exact-match policy:

- every header cell must name a declared column (and, if annotated, its type)
- every declared column must appear exactly once
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeAlias

from sheet_query.models.errors import (
    DuplicateColumnError,
    HeaderFormatError,
    HeaderTypeError,
    MissingColumnError,
    UnknownColumnError,
)
from sheet_query.models.schema import ColumnType, TableSchema

ANNOTATED_HEADER = re.compile(r"^\s*(?P<name>[^<>]+?)\s+<(?P<type>\w+)>\s*$")

ColumnIndexMap: TypeAlias = Mapping[str, int]


@dataclass(frozen=True, slots=True)
class NamedHeader:
    name: str


@dataclass(frozen=True, slots=True)
class TypedHeader:
    name: str
    type: ColumnType


HeaderCell: TypeAlias = NamedHeader | TypedHeader


def parse_header_cell(raw: Any) -> HeaderCell:
    if not isinstance(raw, str):
        raise HeaderTypeError(f"Header is not a string. ({raw!r})")

    if "<" not in raw and ">" not in raw:
        return NamedHeader(raw.strip())

    matched = ANNOTATED_HEADER.match(raw)
    if matched is None:
        raise HeaderFormatError(f"Header is not properly defined. ({raw})")
    try:
        type_ = ColumnType.parse(matched["type"])
    except ValueError as exc:
        raise HeaderFormatError(f"Header names an unknown type. ({raw})") from exc
    return TypedHeader(matched["name"].strip(), type_)


def _match_header(header_row: Sequence[Any], schema: TableSchema) -> dict[str, int]:
    positions: dict[str, int] = {}
    declared = {column.name: column for column in schema.columns}

    for index, raw in enumerate(header_row):
        cell = parse_header_cell(raw)
        column = declared.get(cell.name)
        if column is None or (isinstance(cell, TypedHeader) and cell.type is not column.type):
            raise UnknownColumnError(f"Unknown column name: {raw!r} (table {schema.id})")
        if cell.name in positions:
            raise DuplicateColumnError(f"Column {cell.name!r} appears more than once in table {schema.id}")
        positions[cell.name] = index

    missing = [name for name in schema.column_names if name not in positions]
    if missing:
        raise MissingColumnError(
            f"Table {schema.id} header is missing column(s): {', '.join(repr(m) for m in missing)}"
        )
    return positions


def validate_header(header_row: Sequence[Any], schema: TableSchema) -> None:
    """Raise a :class:`~sheet_query.models.errors.HeaderError` if the header does not fit ``schema``."""

    _match_header(header_row, schema)


def resolve_column_indices(header_row: Sequence[Any], schema: TableSchema) -> ColumnIndexMap:
    """Map each declared column name to its position in ``header_row``."""

    return MappingProxyType(_match_header(header_row, schema))


def index_map_for(schema: TableSchema) -> ColumnIndexMap:
    """Index map of a header laid out in schema column order."""

    return MappingProxyType({name: index for index, name in enumerate(schema.column_names)})


__all__ = [
    "ANNOTATED_HEADER",
    "ColumnIndexMap",
    "HeaderCell",
    "NamedHeader",
    "TypedHeader",
    "index_map_for",
    "parse_header_cell",
    "resolve_column_indices",
    "validate_header",
]
