from sheet_query.models.errors import (
    DuplicateColumnError,
    DuplicateTableError,
    HeaderError,
    HeaderFormatError,
    HeaderTypeError,
    LockTimeoutError,
    MissingColumnError,
    SchemaDefinitionError,
    SchemaMismatchError,
    SessionClosedError,
    SheetQueryError,
    StoreError,
    TableNotFoundError,
    UnknownColumnError,
)
from sheet_query.models.result import Err, Ok, Result
from sheet_query.models.schema import Column, ColumnType, Record, TableSchema
from sheet_query.models.table import RawTable

__all__ = [
    "Column",
    "ColumnType",
    "DuplicateColumnError",
    "DuplicateTableError",
    "Err",
    "HeaderError",
    "HeaderFormatError",
    "HeaderTypeError",
    "LockTimeoutError",
    "MissingColumnError",
    "Ok",
    "RawTable",
    "Record",
    "Result",
    "SchemaDefinitionError",
    "SchemaMismatchError",
    "SessionClosedError",
    "SheetQueryError",
    "StoreError",
    "TableNotFoundError",
    "TableSchema",
    "UnknownColumnError",
]
