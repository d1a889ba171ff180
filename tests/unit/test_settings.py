from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from sheet_query.infrastructure.settings import Settings, TransactionOptions


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "SHEET_QUERY_TIMEOUTS",
        "SHEET_QUERY_LOCK_FILE",
        "SHEET_QUERY_STRICT_TYPES",
        "SHEET_QUERY_WORKBOOK",
        "SHEET_QUERY_LOG_FORMAT",
        "SHEET_QUERY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    settings = Settings.load(cwd=tmp_path)

    assert settings.timeouts == 5000
    assert settings.strict_types is False
    assert settings.log_format == "text"
    assert settings.log_level == logging.INFO
    assert settings.transaction_options() == TransactionOptions()


def test_settings_toml(tmp_path):
    (tmp_path / "settings.toml").write_text(
        'timeouts = 1500\nstrict_types = true\nlog_level = "debug"\n',
        encoding="utf-8",
    )

    settings = Settings.load(cwd=tmp_path)

    assert settings.timeouts == 1500
    assert settings.strict_types is True
    assert settings.log_level == logging.DEBUG


def test_env_overrides_toml(tmp_path, monkeypatch):
    (tmp_path / "settings.toml").write_text("timeouts = 1500\n", encoding="utf-8")
    monkeypatch.setenv("SHEET_QUERY_TIMEOUTS", "250")

    assert Settings.load(cwd=tmp_path).timeouts == 250


def test_explicit_overrides_win(tmp_path, monkeypatch):
    monkeypatch.setenv("SHEET_QUERY_TIMEOUTS", "250")

    assert Settings.load(cwd=tmp_path, timeouts=10).timeouts == 10


@pytest.mark.parametrize(("raw", "expected"), [("WARNING", logging.WARNING), ("10", 10), (30, 30), ("", logging.INFO)])
def test_log_level_coercion(tmp_path, raw, expected):
    assert Settings.load(cwd=tmp_path, log_level=raw).log_level == expected


def test_rejects_bad_values(tmp_path):
    with pytest.raises(ValidationError):
        Settings.load(cwd=tmp_path, log_level="loud")
    with pytest.raises(ValidationError):
        Settings.load(cwd=tmp_path, timeouts=-5)


def test_resolved_lock_file(tmp_path):
    workbook = tmp_path / "groups.xlsx"

    assert Settings.load(cwd=tmp_path).resolved_lock_file(workbook) == tmp_path / "groups.xlsx.lock"
    assert Settings.load(cwd=tmp_path, workbook=workbook).resolved_lock_file() == tmp_path / "groups.xlsx.lock"
    assert Settings.load(cwd=tmp_path).resolved_lock_file() is None

    explicit = Settings.load(cwd=tmp_path, lock_file=Path("/tmp/shared.lock"))
    assert explicit.resolved_lock_file(workbook) == Path("/tmp/shared.lock")
