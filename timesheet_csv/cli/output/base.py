"""
Output adapter base classes.

An adapter turns a parse result, a detected format or an import report
into a single string; the CLI decides where that string goes.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from timesheet_csv.core.parser.models import FormatInfo, ParseResult
    from timesheet_csv.core.rules.models import ValidationReport


class OutputFormat(Enum):
    """Supported output formats."""

    TERMINAL = "terminal"
    JSON = "json"


class OutputAdapter(ABC):
    """Base class for output adapters."""

    format: OutputFormat

    def __init__(self, stream: TextIO | None = None, color: bool = True):
        self.stream = stream or sys.stdout
        self.color = color

    @abstractmethod
    def render_result(self, result: ParseResult) -> str:
        """Render parsed work items, row errors and the row summary."""

    @abstractmethod
    def render_format(self, info: FormatInfo) -> str:
        """Render the detected delimiter, header flag and encoding."""

    @abstractmethod
    def render_report(self, report: ValidationReport) -> str:
        """Render an import validation report."""


def get_output_adapter(
    format: OutputFormat | str,
    stream: TextIO | None = None,
    color: bool = True,
) -> OutputAdapter:
    """
    Get an output adapter by format.

    Raises:
        ValueError: If the format name is unknown
    """
    format = OutputFormat(format)

    # Adapters are imported lazily so `--help` stays cheap
    if format is OutputFormat.JSON:
        from timesheet_csv.cli.output.json import JsonOutput

        return JsonOutput(stream=stream, color=color)

    from timesheet_csv.cli.output.terminal import TerminalOutput

    return TerminalOutput(stream=stream, color=color)
