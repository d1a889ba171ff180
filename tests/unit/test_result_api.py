from __future__ import annotations

from datetime import date

import pytest

from sheet_query.application.api import ApiErr, ApiOk, api_handler, to_envelope
from sheet_query.models.errors import LockTimeoutError, TableNotFoundError
from sheet_query.models.result import Err, Ok


def test_ok_accessors():
    result = Ok([1, 2])

    assert result.is_ok() and not result.is_err()
    assert result.unwrap() == [1, 2]
    assert result.unwrap_or([]) == [1, 2]


def test_err_accessors():
    result = Err(TableNotFoundError(7))

    assert result.is_err() and not result.is_ok()
    assert result.kind == "TableNotFoundError"
    assert result.message == "There's no table of id 7"
    assert result.unwrap_or("fallback") == "fallback"
    with pytest.raises(TableNotFoundError):
        result.unwrap()


def test_envelopes():
    assert to_envelope(Ok({"n": 1})) == ApiOk(data={"n": 1})
    assert to_envelope(Err(LockTimeoutError(5000))) == ApiErr(
        name="LockTimeoutError", message="Could not acquire lock within 5000 ms"
    )
    with pytest.raises(TypeError):
        to_envelope("not a result")  # type: ignore[arg-type]


def test_api_handler_success_is_json_ready():
    @api_handler
    def handler(day):
        return Ok([{"Joined": day}])

    assert handler(date(2024, 5, 1)) == {"ok": True, "data": [{"Joined": "2024-05-01"}]}
    assert handler.__name__ == "handler"


def test_api_handler_failure():
    @api_handler
    def handler():
        return Err(ValueError("bad input"))

    assert handler() == {"ok": False, "name": "ValueError", "message": "bad input"}
