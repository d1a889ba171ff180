"""Runtime configuration for :mod:`sheet_query`.

Values come from, highest precedence first: explicit keyword arguments,
``SHEET_QUERY_*`` environment variables, a ``.env`` file, then a flat
``settings.toml`` whose keys are the field names below. Both files are looked
up in the working directory (or ``cwd`` given to :meth:`Settings.load`).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, TomlConfigSettingsSource

ENV_PREFIX = "SHEET_QUERY_"
SETTINGS_FILE = "settings.toml"
DEFAULT_TIMEOUT_MS = 5000

# Init kwarg carrying the TOML location from ``load`` into the source hook.
_TOML_KWARG = "_sheet_query_toml_file"


def parse_log_level(value: Any) -> Any:
    """Accept ``20``, ``"20"``, ``"info"`` or ``""`` (INFO) for a log level."""

    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Invalid log_level: {value!r}")
    if isinstance(value, int):
        return value

    name = value.strip().upper()
    if not name:
        return logging.INFO
    if name.isdigit():
        return int(name)
    try:
        return logging.getLevelNamesMapping()[name]
    except KeyError:
        raise ValueError(f"Invalid log_level: {value!r}") from None


LogLevel = Annotated[int, BeforeValidator(parse_log_level)]


class TransactionOptions(BaseModel):
    """Per-call options for :func:`~sheet_query.application.runner.with_tables`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timeouts: int = Field(default=DEFAULT_TIMEOUT_MS, ge=0, description="Lock wait bound in milliseconds.")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=".env", extra="ignore")

    timeouts: int = Field(default=DEFAULT_TIMEOUT_MS, ge=0, description="Default lock wait in milliseconds.")
    lock_file: Path | None = Field(default=None, description="Defaults to '<workbook>.lock'.")
    strict_types: bool = False
    workbook: Path | None = None
    log_format: Literal["text", "ndjson"] = "text"
    log_level: LogLevel = logging.INFO

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        init_kwargs = getattr(init_settings, "init_kwargs", {})
        toml_file = init_kwargs.get(_TOML_KWARG) or Path.cwd() / SETTINGS_FILE
        toml = TomlConfigSettingsSource(settings_cls, toml_file=toml_file)
        return init_settings, env_settings, dotenv_settings, toml, file_secret_settings

    @classmethod
    def load(cls, *, cwd: Path | None = None, **overrides: Any) -> "Settings":
        """Load settings as if the process ran in ``cwd``."""

        base = (cwd or Path.cwd()).expanduser().resolve()
        return cls(**{_TOML_KWARG: base / SETTINGS_FILE}, _env_file=base / ".env", **overrides)

    def resolved_lock_file(self, workbook: Path | None = None) -> Path | None:
        if self.lock_file is not None:
            return self.lock_file
        target = workbook or self.workbook
        return None if target is None else target.with_name(f"{target.name}.lock")

    def transaction_options(self) -> TransactionOptions:
        return TransactionOptions(timeouts=self.timeouts)


__all__ = ["DEFAULT_TIMEOUT_MS", "ENV_PREFIX", "LogLevel", "Settings", "TransactionOptions", "parse_log_level"]
