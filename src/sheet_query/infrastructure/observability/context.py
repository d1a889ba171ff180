from __future__ import annotations

import logging
import sys
import uuid
from pathlib import Path
from typing import TextIO

from sheet_query.infrastructure.observability.formatters import NdjsonFormatter, TextFormatter
from sheet_query.infrastructure.observability.logger import RunLogger

FORMATTERS: dict[str, type[logging.Formatter]] = {
    "text": TextFormatter,
    "ndjson": NdjsonFormatter,
    "json": NdjsonFormatter,
}


class RunLogContext:
    """Owns the handlers of one run's logger; closing detaches and closes them."""

    def __init__(self, logger: RunLogger, handlers: list[logging.Handler]) -> None:
        self.logger = logger
        self._handlers = handlers

    def close(self) -> None:
        base = self.logger.logger
        for handler in self._handlers:
            base.removeHandler(handler)
            handler.close()
        self._handlers = []

    def __enter__(self) -> "RunLogContext":
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.close()


def create_run_logger_context(
    *,
    log_format: str = "text",
    log_level: int = logging.INFO,
    console: bool = True,
    stream: TextIO | None = None,
    log_file: Path | None = None,
) -> RunLogContext:
    """Build a fresh, non-propagating logger for one run.

    With ``console`` set, records go to ``stream`` (stderr when omitted).
    ``log_file`` adds a file sink.
    """

    formatter_cls = FORMATTERS.get((log_format or "text").strip().lower())
    if formatter_cls is None:
        raise ValueError(f"log_format must be one of {sorted(FORMATTERS)}, got {log_format!r}")

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(stream if stream is not None else sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    run_id = uuid.uuid4().hex
    base_logger = logging.getLogger(f"sheet_query.run.{run_id}")
    base_logger.setLevel(log_level)
    base_logger.propagate = False
    for handler in handlers:
        handler.setFormatter(formatter_cls())
        base_logger.addHandler(handler)

    return RunLogContext(RunLogger(base_logger, run_id=run_id), handlers)


__all__ = ["FORMATTERS", "RunLogContext", "create_run_logger_context"]
