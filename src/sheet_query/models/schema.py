"""Schema descriptors: a table id plus its ordered, typed columns."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, TypeAlias

from sheet_query.models.errors import SchemaDefinitionError, UnknownColumnError

Record: TypeAlias = dict[str, Any]


class ColumnType(str, Enum):
    """Value type declared for a column."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"

    @classmethod
    def parse(cls, value: "ColumnType | str") -> "ColumnType":
        if isinstance(value, ColumnType):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown column type: {value!r}")

    def accepts(self, value: Any) -> bool:
        # Empty cells come back as None regardless of the declared type.
        if value is None:
            return True
        if self is ColumnType.STRING:
            return isinstance(value, str)
        if self is ColumnType.NUMBER:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if self is ColumnType.BOOLEAN:
            return isinstance(value, bool)
        return isinstance(value, date)

    def default_value(self) -> Any:
        if self is ColumnType.STRING:
            return ""
        if self is ColumnType.NUMBER:
            return 0
        if self is ColumnType.BOOLEAN:
            return False
        raise TypeError(f"Column type {self.value!r} has no default value")


@dataclass(frozen=True, slots=True)
class Column:
    name: str
    type: ColumnType

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise SchemaDefinitionError(f"Column name must be a non-empty string, got {self.name!r}")
        # Header cells are stripped before matching, so a padded name could never match.
        if self.name != self.name.strip():
            raise SchemaDefinitionError(f"Column name has surrounding whitespace: {self.name!r}")
        try:
            object.__setattr__(self, "type", ColumnType.parse(self.type))
        except ValueError as exc:
            raise SchemaDefinitionError(str(exc)) from exc


@dataclass(frozen=True, slots=True)
class TableSchema:
    """Declared shape of one table.

    ``columns`` order is the canonical encode order. Instances are immutable
    and meant to be built once and reused across transactions.
    """

    id: int
    columns: tuple[Column, ...]

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise SchemaDefinitionError(f"Table id must be an integer, got {self.id!r}")

        columns = tuple(self.columns)
        if not columns:
            raise SchemaDefinitionError(f"Table {self.id} declares no columns")

        seen: set[str] = set()
        for column in columns:
            if not isinstance(column, Column):
                raise SchemaDefinitionError(f"Expected Column, got {type(column).__name__}")
            if column.name in seen:
                raise SchemaDefinitionError(f"Table {self.id} declares column {column.name!r} twice")
            seen.add(column.name)

        object.__setattr__(self, "columns", columns)

    @classmethod
    def of(cls, id: int, columns: Iterable[tuple[str, ColumnType | str]]) -> "TableSchema":
        return cls(id=id, columns=tuple(Column(name, type_) for name, type_ in columns))  # type: ignore[arg-type]

    @classmethod
    def from_mapping(cls, id: int, columns: Mapping[str, ColumnType | str]) -> "TableSchema":
        """Build a schema from an ordered ``{name: type}`` mapping."""

        return cls.of(id, columns.items())

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def column(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise UnknownColumnError(f"Unknown column name: {name!r} (table {self.id})")

    def blank_record(self, **values: Any) -> Record:
        """Return a record with type defaults for every column not given in ``values``."""

        for name in values:
            self.column(name)
        return {
            column.name: values[column.name] if column.name in values else column.type.default_value()
            for column in self.columns
        }


__all__ = ["Column", "ColumnType", "Record", "TableSchema"]
