"""In-memory working copy of one table for the duration of a transaction."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from sheet_query.application.codec import decode, encode
from sheet_query.application.header import ColumnIndexMap, resolve_column_indices, validate_header
from sheet_query.infrastructure.observability.logger import NullLogger, RunLogger
from sheet_query.infrastructure.stores.base import FIRST_BODY_ROW, HEADER_ROW, TableStore
from sheet_query.models.errors import SchemaMismatchError, SessionClosedError
from sheet_query.models.schema import Record, TableSchema
from sheet_query.models.table import RawTable

Predicate = Callable[[Record], bool]


class SessionState(str, Enum):
    OPEN = "open"
    DIRTY = "dirty"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class TableSession:
    """Read/set/append/delete over one table's records; writes only on :meth:`commit`.

    Records are owned by the session. ``read`` hands out copies and
    ``set``/``append`` store copies, so nothing is aliased with the caller.
    """

    def __init__(
        self,
        schema: TableSchema,
        table: RawTable,
        column_indices: ColumnIndexMap,
        store: TableStore,
        *,
        strict_types: bool = False,
        logger: RunLogger | None = None,
    ) -> None:
        self.schema = schema
        self._header_row = table.header_row
        self._column_indices = column_indices
        self._store = store
        self._strict_types = strict_types
        self._logger = logger or NullLogger()
        self._records: list[Record] = decode(table.body_rows, column_indices, schema)
        self._stored_row_count = table.row_count
        self._state = SessionState.OPEN

    @classmethod
    def open(
        cls,
        schema: TableSchema,
        table: RawTable,
        store: TableStore,
        *,
        strict_types: bool = False,
        logger: RunLogger | None = None,
    ) -> "TableSession":
        validate_header(table.header_row, schema)
        column_indices = resolve_column_indices(table.header_row, schema)
        return cls(schema, table, column_indices, store, strict_types=strict_types, logger=logger)

    # ------------------------------------------------------------------
    @property
    def table_id(self) -> int:
        return self.schema.id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def dirty(self) -> bool:
        return self._state is SessionState.DIRTY

    @property
    def column_indices(self) -> ColumnIndexMap:
        return self._column_indices

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"TableSession(table_id={self.table_id}, records={len(self._records)}, state={self._state.value})"

    # ------------------------------------------------------------------
    def _ensure_active(self) -> None:
        if self._state is SessionState.DISCARDED:
            raise SessionClosedError(f"Session for table {self.table_id} is closed")

    def _mark_dirty(self) -> None:
        self._state = SessionState.DIRTY

    def _checked(self, records: Iterable[Mapping[str, Any]]) -> list[Record]:
        expected = set(self.schema.column_names)
        checked: list[Record] = []
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise SchemaMismatchError(
                    f"Record {position} for table {self.table_id} is a {type(record).__name__}, not a mapping"
                )
            keys = set(record)
            if keys != expected:
                missing = sorted(expected - keys)
                unexpected = sorted(str(k) for k in keys - expected)
                raise SchemaMismatchError(
                    f"Record {position} for table {self.table_id} does not match its columns "
                    f"(missing={missing}, unexpected={unexpected})"
                )
            if self._strict_types:
                for column in self.schema.columns:
                    value = record[column.name]
                    if not column.type.accepts(value):
                        raise SchemaMismatchError(
                            f"Record {position} column {column.name!r} expects {column.type.value}, "
                            f"got {type(value).__name__} ({value!r})"
                        )
            checked.append(dict(record))
        return checked

    # ------------------------------------------------------------------
    def read(self, *columns: str) -> tuple[Record, ...]:
        """Snapshot of the working set; with ``columns``, only those keys."""

        self._ensure_active()
        if not columns:
            return tuple(dict(record) for record in self._records)
        for name in columns:
            self.schema.column(name)
        return tuple({name: record[name] for name in columns} for record in self._records)

    def set(self, records: Iterable[Mapping[str, Any]]) -> None:
        self._ensure_active()
        self._records = self._checked(records)
        self._mark_dirty()

    def append(self, records: Iterable[Mapping[str, Any]]) -> None:
        self._ensure_active()
        self._records.extend(self._checked(records))
        self._mark_dirty()

    def delete_if(self, predicate: Predicate) -> int:
        """Remove every record ``predicate`` accepts; returns how many went.

        The session is marked dirty even when nothing matched.
        """

        self._ensure_active()
        survivors = [record for record in self._records if not predicate(record)]
        removed = len(self._records) - len(survivors)
        self._records = survivors
        self._mark_dirty()
        return removed

    def commit(self) -> int:
        """Write the working set below the header; returns the record count written.

        Rows left over from a larger previous extent are blanked in the same
        write. An empty working set rewrites the header row alone.

        Stores treat trailing rows whose cells are all ``None`` or ``""`` as
        outside the table, like a sheet's data range. Such records at the end
        of the working set are written but will not be read back.
        """

        self._ensure_active()
        rows = encode(self._records, self.schema, self._column_indices)
        stale = max(self._stored_row_count - len(rows), 0)
        blanks = [[None] * len(self._header_row) for _ in range(stale)]

        if rows:
            self._store.write_rows(self.table_id, FIRST_BODY_ROW, rows + blanks)
        else:
            self._store.write_rows(self.table_id, HEADER_ROW, [list(self._header_row), *blanks])

        self._stored_row_count = len(rows)
        self._state = SessionState.COMMITTED
        self._logger.event(
            "table.committed",
            message=f"Table {self.table_id} committed",
            data={"table_id": self.table_id, "row_count": len(rows), "cleared_rows": stale},
        )
        return len(rows)

    def discard(self) -> None:
        self._state = SessionState.DISCARDED
        self._records = []


__all__ = ["Predicate", "SessionState", "TableSession"]
