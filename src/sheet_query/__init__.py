"""Public API for :mod:`sheet_query`."""

from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING
import tomllib

if TYPE_CHECKING:
    from sheet_query.application.runner import TransactionRunner, with_tables
    from sheet_query.application.session import TableSession
    from sheet_query.infrastructure.locks import FileLock, ThreadLock
    from sheet_query.infrastructure.settings import Settings, TransactionOptions
    from sheet_query.infrastructure.stores import MemoryStore, WorkbookStore
    from sheet_query.models import Column, ColumnType, Err, Ok, TableSchema


def _resolve_version() -> str:
    """Installed distribution version, else the source checkout's pyproject."""

    try:
        return metadata.version("sheet-query")
    except metadata.PackageNotFoundError:
        pass

    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        with pyproject.open("rb") as fh:
            version = tomllib.load(fh).get("project", {}).get("version")
    except (OSError, tomllib.TOMLDecodeError):  # pragma: no cover
        return "unknown"
    return version if isinstance(version, str) and version else "unknown"


__version__ = _resolve_version()

_EXPORTS = {
    "Column": ("sheet_query.models", "Column"),
    "ColumnType": ("sheet_query.models", "ColumnType"),
    "Err": ("sheet_query.models", "Err"),
    "FileLock": ("sheet_query.infrastructure.locks", "FileLock"),
    "MemoryStore": ("sheet_query.infrastructure.stores", "MemoryStore"),
    "Ok": ("sheet_query.models", "Ok"),
    "Settings": ("sheet_query.infrastructure.settings", "Settings"),
    "TableSchema": ("sheet_query.models", "TableSchema"),
    "TableSession": ("sheet_query.application.session", "TableSession"),
    "ThreadLock": ("sheet_query.infrastructure.locks", "ThreadLock"),
    "TransactionOptions": ("sheet_query.infrastructure.settings", "TransactionOptions"),
    "TransactionRunner": ("sheet_query.application.runner", "TransactionRunner"),
    "WorkbookStore": ("sheet_query.infrastructure.stores", "WorkbookStore"),
    "with_tables": ("sheet_query.application.runner", "with_tables"),
}


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = __import__(module_name, fromlist=[attr_name])
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))


__all__ = [
    "Column",
    "ColumnType",
    "Err",
    "FileLock",
    "MemoryStore",
    "Ok",
    "Settings",
    "TableSchema",
    "TableSession",
    "ThreadLock",
    "TransactionOptions",
    "TransactionRunner",
    "WorkbookStore",
    "with_tables",
    "__version__",
]
