from sheet_query.application.api import ApiErr, ApiOk, api_handler, to_envelope
from sheet_query.application.codec import decode, encode
from sheet_query.application.header import (
    NamedHeader,
    TypedHeader,
    index_map_for,
    parse_header_cell,
    resolve_column_indices,
    validate_header,
)
from sheet_query.application.runner import TransactionRunner, with_tables
from sheet_query.application.session import SessionState, TableSession

__all__ = [
    "ApiErr",
    "ApiOk",
    "NamedHeader",
    "SessionState",
    "TableSession",
    "TransactionRunner",
    "TypedHeader",
    "api_handler",
    "decode",
    "encode",
    "index_map_for",
    "parse_header_cell",
    "resolve_column_indices",
    "to_envelope",
    "validate_header",
    "with_tables",
]
