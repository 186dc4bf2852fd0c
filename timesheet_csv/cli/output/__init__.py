"""
Output adapters for CLI.

Provides different output formats: terminal, JSON.
"""

from timesheet_csv.cli.output.base import OutputAdapter, OutputFormat, get_output_adapter
from timesheet_csv.cli.output.json import JsonOutput
from timesheet_csv.cli.output.terminal import TerminalOutput

__all__ = [
    "JsonOutput",
    "OutputAdapter",
    "OutputFormat",
    "TerminalOutput",
    "get_output_adapter",
]
