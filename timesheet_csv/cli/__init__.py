"""
CLI for timesheet-csv.

Thin command-line shell over the parser and validator: it opens input
files, maps outcomes to exit codes and renders results.
"""

from timesheet_csv.cli.context import CliContext, ExitCode, get_exit_code

__all__ = [
    "CliContext",
    "ExitCode",
    "get_exit_code",
]
