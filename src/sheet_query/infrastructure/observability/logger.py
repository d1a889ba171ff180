"""Run-scoped logger for transactions.

Every record carries the ``run_id`` of the logger that produced it and a
fresh ``event_id``. Domain events go through :meth:`RunLogger.event`, which
names them under ``sheet_query.`` and checks their payload against
:data:`~sheet_query.models.events.QUERY_EVENT_SCHEMAS`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import ValidationError

from sheet_query.models.events import DEFAULT_EVENT, QUERY_EVENT_SCHEMAS, QUERY_NAMESPACE

EventData: TypeAlias = Mapping[str, Any]


def event_name(name: str) -> str:
    """``"lock.acquired"`` -> ``"sheet_query.lock.acquired"``; qualified names pass through."""

    short = (name or "").strip().strip(".")
    if short == QUERY_NAMESPACE or short.startswith(f"{QUERY_NAMESPACE}."):
        return short
    return f"{QUERY_NAMESPACE}.{short or 'invalid_event'}"


def check_payload(full_name: str, payload: dict[str, Any]) -> dict[str, Any]:
    if full_name not in QUERY_EVENT_SCHEMAS:
        raise ValueError(f"Unknown event '{full_name}' (add to QUERY_EVENT_SCHEMAS)")

    schema = QUERY_EVENT_SCHEMAS[full_name]
    if schema is None:
        return payload
    try:
        return schema.model_validate(payload, strict=True).model_dump(mode="python")
    except ValidationError as e:
        raise ValueError(f"Invalid payload for event '{full_name}': {e}") from e


class RunLogger(logging.LoggerAdapter):
    """LoggerAdapter that stamps ``run_id``/``event_id`` and emits validated events."""

    def __init__(self, logger: logging.Logger, *, run_id: str | None = None) -> None:
        self._run_id = run_id or uuid.uuid4().hex
        super().__init__(logger, {"run_id": self._run_id})

    @property
    def run_id(self) -> str:
        return self._run_id

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = dict(kwargs.pop("extra", None) or {})
        extra["run_id"] = self._run_id
        extra.setdefault("event_id", uuid.uuid4().hex)
        extra.setdefault("event", event_name(DEFAULT_EVENT))
        kwargs["extra"] = extra
        return msg, kwargs

    def event(
        self,
        name: str,
        *,
        message: str | None = None,
        level: int = logging.INFO,
        data: EventData | None = None,
        exc: BaseException | None = None,
    ) -> None:
        if not self.isEnabledFor(level):
            return

        full_name = event_name(name)
        payload = check_payload(full_name, dict(data or {}))

        extra: dict[str, Any] = {"event": full_name}
        if payload:
            extra["data"] = payload
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self.log(level, message or full_name, extra=extra, exc_info=exc_info)


class NullLogger(RunLogger):
    """Disabled logger; the default wherever no logger is passed in."""

    def __init__(self) -> None:
        base_logger = logging.Logger("sheet_query.null")
        base_logger.addHandler(logging.NullHandler())
        base_logger.propagate = False
        base_logger.disabled = True
        super().__init__(base_logger, run_id="null")

    def __bool__(self) -> bool:
        return False


__all__ = ["EventData", "NullLogger", "RunLogger", "check_payload", "event_name"]
