from __future__ import annotations

import json
from pathlib import Path

import openpyxl
import pytest
from typer.testing import CliRunner

from sheet_query import __version__
from sheet_query.cli.app import app

runner = CliRunner()

GROUP_COLUMNS = ["-c", "Group ID:string", "-c", "Name:string", "-c", "Ave. Grades:number"]


@pytest.fixture
def workbook(tmp_path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for name in ("SHEET_QUERY_WORKBOOK", "SHEET_QUERY_LOCK_FILE", "SHEET_QUERY_TIMEOUTS"):
        monkeypatch.delenv(name, raising=False)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Groups"
    ws.append(["Name", "Ave. Grades <number>", "Group ID"])
    ws.append(["aaa", 1, "0123"])
    ws.append(["bbb", 6, "4567"])
    path = tmp_path / "groups.xlsx"
    wb.save(path)
    return path


def _invoke(*args: str):
    return runner.invoke(app, [*args, "--log-level", "CRITICAL"])


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_read_prints_records(workbook):
    result = _invoke("read", "--workbook", str(workbook), "--table-id", "0", *GROUP_COLUMNS)

    assert result.exit_code == 0, result.stdout
    assert json.loads(result.stdout) == {
        "ok": True,
        "data": [
            {"Group ID": "0123", "Name": "aaa", "Ave. Grades": 1},
            {"Group ID": "4567", "Name": "bbb", "Ave. Grades": 6},
        ],
    }


def test_read_by_sheet_title(workbook):
    result = _invoke("read", "-w", str(workbook), "-t", "7", "--sheet", "Groups", *GROUP_COLUMNS)

    assert result.exit_code == 0, result.stdout
    assert len(json.loads(result.stdout)["data"]) == 2


def test_check_prints_column_positions(workbook):
    result = _invoke("check", "--workbook", str(workbook), "--table-id", "0", *GROUP_COLUMNS)

    assert result.exit_code == 0, result.stdout
    assert json.loads(result.stdout)["data"] == {
        "columns": {"Group ID": 2, "Name": 0, "Ave. Grades": 1},
        "row_count": 2,
    }


def test_check_reports_header_mismatch(workbook):
    result = _invoke(
        "check", "--workbook", str(workbook), "--table-id", "0", "-c", "Group ID:string", "-c", "Name:string"
    )

    assert result.exit_code == 1
    envelope = json.loads(result.stdout)
    assert envelope["ok"] is False
    assert envelope["name"] == "UnknownColumnError"
    assert "Ave. Grades" in envelope["message"]


def test_unknown_table_id(workbook):
    result = _invoke("read", "--workbook", str(workbook), "--table-id", "3", *GROUP_COLUMNS)

    assert result.exit_code == 1
    assert json.loads(result.stdout)["name"] == "TableNotFoundError"


def test_workbook_from_env(workbook, monkeypatch):
    monkeypatch.setenv("SHEET_QUERY_WORKBOOK", str(workbook))

    result = _invoke("read", "--table-id", "0", *GROUP_COLUMNS)

    assert result.exit_code == 0, result.stdout


def test_missing_workbook_is_usage_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SHEET_QUERY_WORKBOOK", raising=False)

    result = _invoke("read", "--workbook", str(tmp_path / "absent.xlsx"), "--table-id", "0", *GROUP_COLUMNS)

    assert result.exit_code == 2


def test_bad_column_spec_is_usage_error(workbook):
    result = _invoke("read", "--workbook", str(workbook), "--table-id", "0", "-c", "Group ID")

    assert result.exit_code == 2


def test_debug_logging_reports_effective_settings(workbook):
    result = runner.invoke(
        app,
        [
            "read", "--workbook", str(workbook), "--table-id", "0", *GROUP_COLUMNS,
            "--log-level", "DEBUG", "--log-format", "ndjson",
        ],
    )

    assert result.exit_code == 0
    events = [json.loads(line) for line in result.output.splitlines() if line.startswith('{"timestamp"')]
    effective = next(e for e in events if e["event"] == "sheet_query.settings.effective")
    assert effective["data"]["settings"]["timeouts"] == 5000
    assert effective["data"]["settings"]["log_format"] == "text"
