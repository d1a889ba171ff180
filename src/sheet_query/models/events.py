"""Event payload schemas and schema registry for sheet-query logging.

Payload models are strict:
- ``extra="forbid"`` to prevent accidental schema drift
- runtime validation uses ``model_validate(..., strict=True)``
"""

from __future__ import annotations

from typing import Annotated, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

QUERY_NAMESPACE = "sheet_query"

DEFAULT_EVENT = "log"  # fallback event for plain log lines

PayloadModel: TypeAlias = type[BaseModel] | None

NonNegativeInt = Annotated[int, Field(ge=0)]


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TransactionStartedPayload(StrictModel):
    table_ids: list[int]
    timeout_ms: NonNegativeInt


class TransactionCompletedPayload(StrictModel):
    table_ids: list[int]
    committed_tables: list[int]


class TransactionFailedPayload(StrictModel):
    table_ids: list[int]
    error_kind: str
    message: str


class LockAcquiredPayload(StrictModel):
    timeout_ms: NonNegativeInt


class LockTimeoutPayload(StrictModel):
    timeout_ms: NonNegativeInt


class TableOpenedPayload(StrictModel):
    table_id: int
    row_count: NonNegativeInt
    column_count: NonNegativeInt


class TableCommittedPayload(StrictModel):
    table_id: int
    row_count: NonNegativeInt
    cleared_rows: NonNegativeInt


# Registry:
# - Missing key: unregistered (strict sheet_query.* will error)
# - Value None: known-but-freeform payload (no validation)
# - Value BaseModel: validate + normalize payload through model
QUERY_EVENT_SCHEMAS: dict[str, PayloadModel] = {
    f"{QUERY_NAMESPACE}.{DEFAULT_EVENT}": None,

    f"{QUERY_NAMESPACE}.transaction.started": TransactionStartedPayload,
    f"{QUERY_NAMESPACE}.transaction.completed": TransactionCompletedPayload,
    f"{QUERY_NAMESPACE}.transaction.failed": TransactionFailedPayload,

    f"{QUERY_NAMESPACE}.lock.acquired": LockAcquiredPayload,
    f"{QUERY_NAMESPACE}.lock.timeout": LockTimeoutPayload,
    f"{QUERY_NAMESPACE}.lock.released": None,

    f"{QUERY_NAMESPACE}.table.opened": TableOpenedPayload,
    f"{QUERY_NAMESPACE}.table.committed": TableCommittedPayload,

    f"{QUERY_NAMESPACE}.settings.effective": None,
}


__all__ = [
    "DEFAULT_EVENT",
    "QUERY_EVENT_SCHEMAS",
    "QUERY_NAMESPACE",
    "PayloadModel",
    "StrictModel",
]
