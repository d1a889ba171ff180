"""CLI entrypoint for :mod:`sheet_query`.

- `read`    - print a table's records as JSON.
- `check`   - validate a table's header and print its column positions.
- `version` - print the package version.

Both table commands run inside one lock-guarded, read-only transaction.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer

from sheet_query import __version__
from sheet_query.application.api import to_envelope
from sheet_query.application.runner import TransactionRunner
from sheet_query.application.session import TableSession
from sheet_query.cli.common import (
    COLUMN_OPTION,
    LOG_FORMAT_OPTION,
    LOG_LEVEL_OPTION,
    SHEET_OPTION,
    TABLE_ID_OPTION,
    TIMEOUT_OPTION,
    WORKBOOK_OPTION,
    LogFormat,
    parse_columns,
    resolve_logging,
    resolve_workbook,
)
from sheet_query.infrastructure.locks import FileLock
from sheet_query.infrastructure.observability.context import create_run_logger_context
from sheet_query.infrastructure.settings import Settings
from sheet_query.infrastructure.stores.workbook import WorkbookStore

app = typer.Typer(
    help=(
        "sheet-query: typed, lock-guarded queries over workbook tables.\n\n"
        "```bash\n"
        "sheet-query read --workbook groups.xlsx --table-id 0 \\\n"
        "    -c 'Group ID:string' -c 'Name:string' -c 'Ave. Grades:number'\n"
        "```\n"
    ),
    no_args_is_help=True,
    rich_markup_mode="markdown",
)


def _run_single_table(
    *,
    workbook: Optional[Path],
    table_id: int,
    columns: List[str],
    sheet: Optional[str],
    timeout: Optional[int],
    log_format: Optional[LogFormat],
    log_level: Optional[str],
    procedure: Callable[[TableSession], Any],
) -> None:
    settings = Settings()
    workbook_path = resolve_workbook(workbook, settings)
    schema = parse_columns(table_id, columns)
    effective_format, effective_level = resolve_logging(
        log_format=log_format,
        log_level=log_level,
        settings=settings,
    )

    store = WorkbookStore(workbook_path, sheet_ids={table_id: sheet} if sheet else None)
    lock = FileLock(settings.resolved_lock_file(workbook_path))

    try:
        with create_run_logger_context(log_format=effective_format, log_level=effective_level) as log_ctx:
            log_ctx.logger.event(
                "settings.effective",
                message="Effective sheet-query settings",
                level=logging.DEBUG,
                data={"settings": settings.model_dump(mode="json", exclude_none=True)},
            )
            runner = TransactionRunner(store, lock, settings=settings, logger=log_ctx.logger)
            result = runner.run([schema], lambda sessions: procedure(sessions[0]), timeout_ms=timeout)
    finally:
        store.close()

    envelope = to_envelope(result)
    typer.echo(json.dumps(envelope.model_dump(mode="json"), ensure_ascii=False, indent=2))
    if result.is_err():
        raise typer.Exit(code=1)


@app.command("read")
def read_command(
    workbook: Optional[Path] = WORKBOOK_OPTION,
    table_id: int = TABLE_ID_OPTION,
    columns: List[str] = COLUMN_OPTION,
    sheet: Optional[str] = SHEET_OPTION,
    timeout: Optional[int] = TIMEOUT_OPTION,
    log_format: Optional[LogFormat] = LOG_FORMAT_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Print every record of a table."""

    _run_single_table(
        workbook=workbook,
        table_id=table_id,
        columns=columns,
        sheet=sheet,
        timeout=timeout,
        log_format=log_format,
        log_level=log_level,
        procedure=lambda session: list(session.read()),
    )


@app.command("check")
def check_command(
    workbook: Optional[Path] = WORKBOOK_OPTION,
    table_id: int = TABLE_ID_OPTION,
    columns: List[str] = COLUMN_OPTION,
    sheet: Optional[str] = SHEET_OPTION,
    timeout: Optional[int] = TIMEOUT_OPTION,
    log_format: Optional[LogFormat] = LOG_FORMAT_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Validate a table's header against the declared columns."""

    _run_single_table(
        workbook=workbook,
        table_id=table_id,
        columns=columns,
        sheet=sheet,
        timeout=timeout,
        log_format=log_format,
        log_level=log_level,
        procedure=lambda session: {"columns": dict(session.column_indices), "row_count": len(session)},
    )


@app.command("version")
def version_command() -> None:
    """Print the package version."""
    typer.echo(__version__)


def main() -> None:
    """Entrypoint used by console scripts and `python -m sheet_query`."""
    app()


__all__ = ["app", "main"]
