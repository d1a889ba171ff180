"""JSON-ready envelopes for functions that return a :class:`Result`.

Outer layers (RPC handlers, the CLI) expose transaction outcomes as::

    {"ok": true, "data": ...}
    {"ok": false, "name": "<ErrorKind>", "message": "..."}
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Literal, ParamSpec

from pydantic import BaseModel, ConfigDict

from sheet_query.models.result import Err, Ok, Result

P = ParamSpec("P")


class ApiOk(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ok: Literal[True] = True
    data: Any = None


class ApiErr(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ok: Literal[False] = False
    name: str
    message: str


def to_envelope(result: Result[Any, BaseException]) -> ApiOk | ApiErr:
    if isinstance(result, Ok):
        return ApiOk(data=result.value)
    if isinstance(result, Err):
        return ApiErr(name=result.kind, message=result.message)
    raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")


def api_handler(fn: Callable[P, Result[Any, BaseException]]) -> Callable[P, dict[str, Any]]:
    """Wrap ``fn`` so callers receive a plain envelope dict instead of a Result."""

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> dict[str, Any]:
        return to_envelope(fn(*args, **kwargs)).model_dump(mode="json")

    return wrapper


__all__ = ["ApiErr", "ApiOk", "api_handler", "to_envelope"]
