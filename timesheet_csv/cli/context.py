"""
CLI context and configuration.

Manages CLI state, exit codes, and shared context.
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path  # noqa: TC003

from pydantic import BaseModel, Field


class ExitCode(IntEnum):
    """CLI exit codes following Unix conventions."""

    SUCCESS = 0  # All rows parsed and valid
    ERROR = 1  # Row or validation errors found
    FATAL = 2  # Fatal error (unreadable file, bad header, etc.)
    USAGE = 64  # Command line usage error
    CONFIG = 78  # Configuration error


class CliContext(BaseModel):
    """Shared context for CLI commands."""

    # Output settings
    output: str = Field(default="terminal")
    output_file: Path | None = Field(default=None)
    color: bool = Field(default=True)
    quiet: bool = Field(default=False)
    verbose: bool = Field(default=False)

    # Input settings
    max_bytes: int | None = Field(default=None, description="None = unlimited")
    limits_file: Path | None = Field(default=None)

    model_config = {"frozen": False}


def get_exit_code(fatal: bool, has_errors: bool) -> ExitCode:
    """Determine exit code from the outcome of a command."""
    if fatal:
        return ExitCode.FATAL
    if has_errors:
        return ExitCode.ERROR
    return ExitCode.SUCCESS
