"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``ENROLCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``enrolctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from enrolctl.config.discovery import find_config
from enrolctl.config.models import (
    AllocationConfig,
    CohortConfig,
    FlagsConfig,
    IdentifierConfig,
    StoreConfig,
)


class ConfigFileError(ValueError):
    """Raised when enrolctl.toml cannot be parsed."""


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``enrolctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigFileError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path is handed to settings_customise_sources through thread-local state.
_tls = threading.local()


class EnrolSettings(BaseSettings):
    """Unified, frozen settings for enrolctl.

    Attributes:
        root: Workspace root (parent of ``enrolctl.toml``, or CWD).
        config_path: The TOML file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ENROLCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    cohort: CohortConfig = Field(default_factory=CohortConfig)
    identifier: IdentifierConfig = Field(default_factory=IdentifierConfig)
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    flags: FlagsConfig = Field(default_factory=FlagsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def db_path(self) -> Path:
        """Resolved SQLite store path."""
        return self._resolve(self.store.path)

    @property
    def flags_path(self) -> Path:
        """Resolved client-side submission flag file."""
        return self._resolve(self.flags.path)

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> EnrolSettings:
        """Construct settings from a CLI invocation.

        Discovers ``enrolctl.toml`` via walk-up (or explicit *config_path*),
        resolves *root* from the config file's parent directory, and merges
        CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
