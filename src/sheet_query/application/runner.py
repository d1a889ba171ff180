"""Lock-guarded multi-table transactions.

``with_tables`` acquires the shared lock, opens one :class:`TableSession` per
schema, runs the caller's procedure with them and releases the lock on every
exit path. Failures come back as :class:`~sheet_query.models.result.Err`.

Commits are per table. If the procedure commits table A and then raises
before committing table B, A's write stays and B's changes are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from sheet_query.application.session import SessionState, TableSession
from sheet_query.infrastructure.locks import Lock
from sheet_query.infrastructure.observability.logger import NullLogger, RunLogger
from sheet_query.infrastructure.settings import Settings, TransactionOptions
from sheet_query.infrastructure.stores.base import TableStore
from sheet_query.models.errors import DuplicateTableError, LockTimeoutError, TableNotFoundError
from sheet_query.models.result import Err, Ok, Result
from sheet_query.models.schema import TableSchema

T = TypeVar("T")

Procedure = Callable[[tuple[TableSession, ...]], T]


class TransactionRunner:
    """Runs procedures against a store while holding ``lock``."""

    def __init__(
        self,
        store: TableStore,
        lock: Lock,
        *,
        settings: Settings | None = None,
        logger: RunLogger | None = None,
    ) -> None:
        self.store = store
        self.lock = lock
        self.settings = settings or Settings()
        self.logger = logger or NullLogger()

    # ------------------------------------------------------------------
    def open_sessions(self, schemas: Sequence[TableSchema]) -> tuple[TableSession, ...]:
        """Open one session per schema; the caller must hold the lock."""

        tables = {table.id: table for table in self.store.list_tables()}
        sessions: list[TableSession] = []
        for schema in schemas:
            table = tables.get(schema.id)
            if table is None:
                raise TableNotFoundError(schema.id)
            session = TableSession.open(
                schema,
                table,
                self.store,
                strict_types=self.settings.strict_types,
                logger=self.logger,
            )
            self.logger.event(
                "table.opened",
                level=logging.DEBUG,
                data={"table_id": schema.id, "row_count": table.row_count, "column_count": table.width},
            )
            sessions.append(session)
        return tuple(sessions)

    def run(
        self,
        schemas: Sequence[TableSchema],
        procedure: Procedure[T],
        *,
        timeout_ms: int | None = None,
    ) -> Result[T, Exception]:
        timeout = self.settings.timeouts if timeout_ms is None else timeout_ms
        table_ids = [schema.id for schema in schemas]

        try:
            if timeout < 0:
                raise ValueError(f"timeout_ms must be >= 0, got {timeout}")
            self.logger.event(
                "transaction.started",
                level=logging.DEBUG,
                data={"table_ids": table_ids, "timeout_ms": timeout},
            )

            seen: set[int] = set()
            for table_id in table_ids:
                if table_id in seen:
                    raise DuplicateTableError(table_id)
                seen.add(table_id)

            if not self.lock.acquire(timeout):
                self.logger.event("lock.timeout", level=logging.WARNING, data={"timeout_ms": timeout})
                raise LockTimeoutError(timeout)
        except Exception as exc:
            return self._failed(table_ids, exc)

        self.logger.event("lock.acquired", level=logging.DEBUG, data={"timeout_ms": timeout})
        sessions: tuple[TableSession, ...] = ()
        try:
            sessions = self.open_sessions(schemas)
            value = procedure(sessions)
        except Exception as exc:
            return self._failed(table_ids, exc)
        else:
            committed = [s.table_id for s in sessions if s.state is SessionState.COMMITTED]
            self.logger.event(
                "transaction.completed",
                data={"table_ids": table_ids, "committed_tables": committed},
            )
            return Ok(value)
        finally:
            for session in sessions:
                session.discard()
            self.lock.release()
            self.logger.event("lock.released", level=logging.DEBUG)

    def _failed(self, table_ids: list[int], exc: Exception) -> Err[Exception]:
        self.logger.event(
            "transaction.failed",
            message=f"Transaction failed: {exc}",
            level=logging.ERROR,
            data={"table_ids": table_ids, "error_kind": type(exc).__name__, "message": str(exc)},
            exc=exc,
        )
        return Err(exc)


def with_tables(
    schemas: Sequence[TableSchema],
    procedure: Procedure[T],
    *,
    store: TableStore,
    lock: Lock,
    options: TransactionOptions | None = None,
    settings: Settings | None = None,
    logger: RunLogger | None = None,
) -> Result[T, Exception]:
    """Run ``procedure`` with one session per schema under ``lock``.

    ``options.timeouts`` (milliseconds) bounds the lock wait. Without
    ``options`` the bound comes from ``settings`` (default 5000).
    """

    runner = TransactionRunner(store, lock, settings=settings, logger=logger)
    effective = options if options is not None else runner.settings.transaction_options()
    return runner.run(schemas, procedure, timeout_ms=effective.timeouts)


__all__ = ["Procedure", "TransactionRunner", "with_tables"]
