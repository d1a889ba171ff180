from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from sheet_query.models.events import DEFAULT_EVENT, QUERY_NAMESPACE

# Payload keys promoted to the front of a text line, in this order.
_TEXT_KEYS = ("table_id", "table_ids", "row_count", "cleared_rows", "timeout_ms", "error_kind")


def _timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def event_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Flatten a record into the fields both formatters render.

    Records that did not pass through :class:`RunLogger` get an empty run id
    and the default event name.
    """

    fields: dict[str, Any] = {
        "timestamp": _timestamp(record.created),
        "level": record.levelname.lower(),
        "event": getattr(record, "event", None) or f"{QUERY_NAMESPACE}.{DEFAULT_EVENT}",
        "message": record.getMessage(),
        "run_id": getattr(record, "run_id", ""),
        "event_id": getattr(record, "event_id", ""),
    }
    data = getattr(record, "data", None)
    if data:
        fields["data"] = dict(data)
    if record.exc_info and record.exc_info[1] is not None:
        fields["error"] = {
            "type": type(record.exc_info[1]).__name__,
            "message": str(record.exc_info[1]),
        }
    return fields


class NdjsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        fields = event_fields(record)
        if record.exc_info:
            fields.setdefault("error", {})["stack_trace"] = self.formatException(record.exc_info)
        return json.dumps(fields, ensure_ascii=False, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """``[time] LEVEL event: message (key=value, ...)`` plus the traceback, if any."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        fields = event_fields(record)
        line = f"[{fields['timestamp']}] {fields['level'].upper()} {fields['event']}"
        if fields["message"] and fields["message"] != fields["event"]:
            line += f": {fields['message']}"

        data = fields.get("data") or {}
        keys = [k for k in _TEXT_KEYS if k in data] + sorted(k for k in data if k not in _TEXT_KEYS)
        if keys:
            line += " (" + ", ".join(f"{k}={data[k]}" for k in keys) + ")"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


__all__ = ["NdjsonFormatter", "TextFormatter", "event_fields"]
