from sheet_query.infrastructure.observability.context import RunLogContext, create_run_logger_context
from sheet_query.infrastructure.observability.formatters import NdjsonFormatter, TextFormatter
from sheet_query.infrastructure.observability.logger import NullLogger, RunLogger

__all__ = [
    "NdjsonFormatter",
    "NullLogger",
    "RunLogContext",
    "RunLogger",
    "TextFormatter",
    "create_run_logger_context",
]
