"""
Limits loader.

Loads validation thresholds from YAML files.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ValidationLimits

LIMITS_ENV_VAR = "TIMESHEET_CSV_LIMITS"


class LimitsConfigError(Exception):
    """Limits file is missing, unreadable or invalid."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def load_limits(path: Path | str) -> ValidationLimits:
    """
    Load validation limits from a YAML file.

    Keys not present keep their defaults; unknown keys are rejected.

    YAML format:
    ```yaml
    limits:
      max_hours: 16
      max_rate: 250
      generic_descriptions: [work, misc]
    ```

    Raises:
        LimitsConfigError: If the file cannot be read or does not validate
    """
    path = Path(path)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise LimitsConfigError(path, f"cannot read limits file: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise LimitsConfigError(path, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise LimitsConfigError(path, "expected a mapping at the top level")

    limits_data = data.get("limits", {}) or {}
    if not isinstance(limits_data, dict):
        raise LimitsConfigError(path, "'limits' must be a mapping")

    try:
        return ValidationLimits.model_validate(limits_data)
    except ValidationError as e:
        raise LimitsConfigError(path, f"invalid limits: {e}") from e


def resolve_limits(path: Path | str | None = None) -> ValidationLimits:
    """
    Resolve limits from an explicit path, then $TIMESHEET_CSV_LIMITS, then defaults.

    Raises:
        LimitsConfigError: If a configured file cannot be loaded
    """
    if path is None:
        path = os.environ.get(LIMITS_ENV_VAR) or None

    if path is None:
        return ValidationLimits()

    return load_limits(path)
