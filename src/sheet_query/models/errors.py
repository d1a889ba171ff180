"""Error hierarchy for sheet queries.

Every failure surfaced by a transaction is one of these, carried inside an
:class:`~sheet_query.models.result.Err`.
"""

from __future__ import annotations


class SheetQueryError(Exception):
    """Base class for sheet-query exceptions."""


class LockTimeoutError(SheetQueryError):
    """Raised when the shared lock is not acquired within the wait bound."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Could not acquire lock within {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class TableNotFoundError(SheetQueryError):
    """Raised when no backing table carries the requested id."""

    def __init__(self, table_id: int) -> None:
        super().__init__(f"There's no table of id {table_id}")
        self.table_id = table_id


class DuplicateTableError(SheetQueryError):
    """Raised when one transaction names the same table twice."""

    def __init__(self, table_id: int) -> None:
        super().__init__(f"Table {table_id} is requested more than once")
        self.table_id = table_id


class SchemaDefinitionError(SheetQueryError, ValueError):
    """Raised when a schema descriptor is malformed."""


class HeaderError(SheetQueryError):
    """Base class for header/schema mismatches."""


class HeaderTypeError(HeaderError):
    """Raised when a header cell is not a string."""


class HeaderFormatError(HeaderError):
    """Raised when an annotated header does not read ``name <type>``."""


class UnknownColumnError(HeaderError):
    """Raised when a column name is not declared in the schema."""


class MissingColumnError(HeaderError):
    """Raised when a declared column never appears in the header."""


class DuplicateColumnError(HeaderError):
    """Raised when the header names the same column twice."""


class SchemaMismatchError(SheetQueryError):
    """Raised when records handed to a session do not fit its schema."""


class SessionClosedError(SheetQueryError):
    """Raised when a session is used after its transaction ended."""


class StoreError(SheetQueryError):
    """Raised when the backing store cannot be read or written."""


__all__ = [
    "SheetQueryError",
    "LockTimeoutError",
    "TableNotFoundError",
    "DuplicateTableError",
    "SchemaDefinitionError",
    "HeaderError",
    "HeaderTypeError",
    "HeaderFormatError",
    "UnknownColumnError",
    "MissingColumnError",
    "DuplicateColumnError",
    "SchemaMismatchError",
    "SessionClosedError",
    "StoreError",
]
