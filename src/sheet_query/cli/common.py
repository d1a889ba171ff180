"""Shared helpers/options for the sheet-query CLI."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from typer import BadParameter

from sheet_query.infrastructure.settings import Settings
from sheet_query.models.errors import SchemaDefinitionError
from sheet_query.models.schema import ColumnType, TableSchema


class LogFormat(str, Enum):
    """Supported log output formats."""

    text = "text"
    ndjson = "ndjson"


WORKBOOK_OPTION = typer.Option(
    None,
    "--workbook",
    "-w",
    dir_okay=False,
    resolve_path=True,
    help="Workbook (.xlsx) holding the tables. Defaults to SHEET_QUERY_WORKBOOK.",
)
TABLE_ID_OPTION = typer.Option(..., "--table-id", "-t", help="Table id (worksheet position unless mapped).")
COLUMN_OPTION = typer.Option(
    ...,
    "--column",
    "-c",
    help="Declared column as NAME:TYPE (string, number, boolean, date). Repeat in order.",
)
SHEET_OPTION = typer.Option(
    None,
    "--sheet",
    help="Worksheet title for --table-id, instead of positional ids.",
)
TIMEOUT_OPTION = typer.Option(None, "--timeout", min=0, help="Lock wait in milliseconds (default: settings).")
LOG_FORMAT_OPTION = typer.Option(None, "--log-format", case_sensitive=False, help="Log output format.")
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Log level name (DEBUG, INFO, WARNING, ...).")


def resolve_log_level(log_level: Optional[str], default_level: int) -> int:
    """Resolve a string log level to a logging level constant."""
    if not log_level:
        return default_level

    resolved = logging.getLevelNamesMapping().get(str(log_level).upper())
    if isinstance(resolved, int):
        return resolved

    raise BadParameter(f"Invalid log level: {log_level}", param_hint="log_level")


def resolve_logging(
    *,
    log_format: Optional[LogFormat],
    log_level: Optional[str],
    settings: Settings,
) -> tuple[str, int]:
    effective_format = log_format.value if log_format else settings.log_format
    return effective_format, resolve_log_level(log_level, settings.log_level)


def resolve_workbook(workbook: Optional[Path], settings: Settings) -> Path:
    """Resolve the workbook from the CLI option or settings/env."""

    candidate = workbook or settings.workbook
    if candidate is None:
        raise BadParameter(
            "Workbook is required (pass --workbook or set SHEET_QUERY_WORKBOOK).",
            param_hint="--workbook",
        )
    resolved = Path(candidate).expanduser().resolve()
    if not resolved.is_file():
        raise BadParameter(f"Workbook not found: {resolved}", param_hint="--workbook")
    return resolved


def parse_columns(table_id: int, specs: List[str]) -> TableSchema:
    """Build a schema from ``NAME:TYPE`` specs; the type splits on the last colon."""

    columns: list[tuple[str, ColumnType]] = []
    for spec in specs:
        name, sep, type_text = spec.rpartition(":")
        if not sep or not name.strip():
            raise BadParameter(f"Expected NAME:TYPE, got {spec!r}", param_hint="--column")
        try:
            columns.append((name.strip(), ColumnType.parse(type_text)))
        except ValueError as exc:
            raise BadParameter(str(exc), param_hint="--column") from exc

    try:
        return TableSchema.of(table_id, columns)
    except SchemaDefinitionError as exc:
        raise BadParameter(str(exc), param_hint="--column") from exc


__all__ = [
    "COLUMN_OPTION",
    "LOG_FORMAT_OPTION",
    "LOG_LEVEL_OPTION",
    "LogFormat",
    "SHEET_OPTION",
    "TABLE_ID_OPTION",
    "TIMEOUT_OPTION",
    "WORKBOOK_OPTION",
    "parse_columns",
    "resolve_log_level",
    "resolve_logging",
    "resolve_workbook",
]
