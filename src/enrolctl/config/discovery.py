"""Config file discovery and loading.

Walk-up finder locates enrolctl.toml, similar to how git finds .git/.
Supports ENROLCTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any

from enrolctl.config.models import EnrolConfig

CONFIG_FILENAME = "enrolctl.toml"
CONFIG_ENV_VAR = "ENROLCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for enrolctl.toml.

    ENROLCTL_CONFIG wins when set; a dangling value yields None rather
    than falling back to the walk-up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> EnrolConfig:
    """Load and validate config from a TOML file.

    Returns the default EnrolConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return EnrolConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return EnrolConfig.model_validate(data)


def render_default_config(
    *,
    cohort_type: str,
    cohort_number: str,
    starting_number: int,
) -> str:
    """Minimal enrolctl.toml written by ``enrolctl init``."""
    return (
        "# enrolctl configuration. Only overrides belong here.\n"
        "[cohort]\n"
        f"cohort_type = {json.dumps(cohort_type)}\n"
        f"cohort_number = {json.dumps(cohort_number)}\n"
        f"starting_number = {starting_number}\n"
    )
