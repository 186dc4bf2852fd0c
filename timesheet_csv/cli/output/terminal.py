"""
Terminal output adapter.

Renders parse results with ANSI colors when writing to a TTY.
"""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, TextIO

from timesheet_csv.cli.output.base import OutputAdapter, OutputFormat
from timesheet_csv.core.parser.errors import get_error_description

if TYPE_CHECKING:
    from timesheet_csv.core.parser.errors import ParseError
    from timesheet_csv.core.parser.models import FormatInfo, ParseResult, WorkItem
    from timesheet_csv.core.rules.models import ValidationReport


def _supports_unicode() -> bool:
    """Check if terminal supports Unicode."""
    try:
        "✓".encode(sys.stdout.encoding or "utf-8")
        return True
    except (UnicodeEncodeError, LookupError):
        return False


ERROR_SYMBOL_UNICODE = "✖"
ERROR_SYMBOL_ASCII = "X"
WARN_SYMBOL_UNICODE = "⚠"
WARN_SYMBOL_ASCII = "!"
SUCCESS_SYMBOL_UNICODE = "✓"
SUCCESS_SYMBOL_ASCII = "OK"

DELIMITER_NAMES = {",": "comma", "\t": "tab", ";": "semicolon"}


class TerminalOutput(OutputAdapter):
    """Terminal output with ANSI colors."""

    format = OutputFormat.TERMINAL

    def __init__(self, stream: TextIO | None = None, color: bool = True):
        super().__init__(stream=stream, color=color)
        self._use_color = color and self._is_tty()
        use_unicode = _supports_unicode()
        self._error_symbol = ERROR_SYMBOL_UNICODE if use_unicode else ERROR_SYMBOL_ASCII
        self._warn_symbol = WARN_SYMBOL_UNICODE if use_unicode else WARN_SYMBOL_ASCII
        self._success_symbol = SUCCESS_SYMBOL_UNICODE if use_unicode else SUCCESS_SYMBOL_ASCII

    def _is_tty(self) -> bool:
        """Check if output is a TTY."""
        return hasattr(self.stream, "isatty") and self.stream.isatty()

    def render_result(self, result: ParseResult) -> str:
        """Render parse result as a work item table plus errors."""
        lines: list[str] = []

        if result.work_items:
            lines.append(self._style("Work items", "bold"))
            lines.extend(self._format_item(item) for item in result.work_items)

        if result.errors:
            lines.append(self._style("\nErrors", "bold"))
            lines.extend(self._format_error(error) for error in result.errors)
            lines.extend(self._format_error_counts(result.errors))

        lines.append("")
        lines.append(self._format_summary(result))
        return "\n".join(lines)

    def render_format(self, info: FormatInfo) -> str:
        """Render detected format."""
        delimiter = DELIMITER_NAMES.get(info.delimiter, repr(info.delimiter))
        header = "yes" if info.has_header else "no"
        return "\n".join(
            [
                f"Format:    {self._style(info.name.value, 'bold')}",
                f"Delimiter: {delimiter}",
                f"Header:    {header}",
                f"Encoding:  {info.encoding}",
            ]
        )

    def render_report(self, report: ValidationReport) -> str:
        """Render import validation report."""
        lines: list[str] = []

        if report.error:
            lines.append(self._style(f"{self._error_symbol} {report.error}", "bold red"))
        elif report.parse_result is not None:
            lines.append(self.render_result(report.parse_result))

        if report.batch_error:
            lines.append(self._style(f"{self._error_symbol} {report.batch_error}", "red"))

        for warning in report.warnings:
            lines.append(
                self._style(f"{self._warn_symbol} [{warning.type}] {warning.message}", "yellow")
            )

        if report.suggestions:
            lines.append(self._style("\nSuggestions", "bold"))
            lines.extend(f"  - {suggestion}" for suggestion in report.suggestions)

        lines.append("")
        if report.valid:
            lines.append(self._style(f"{self._success_symbol} Import is valid.", "green"))
        else:
            lines.append(self._style(f"{self._error_symbol} Import is not valid.", "red"))
        return "\n".join(lines)

    def _format_item(self, item: WorkItem) -> str:
        return (
            f"  {item.date.isoformat()}  {item.hours:>6}h x {item.rate:>8} = "
            f"{item.total:>10}  {item.description}"
        )

    def _format_error(self, error: ParseError) -> str:
        symbol = self._style(self._error_symbol, "red")
        code = f" [{self._style(error.code, 'dim')}]" if error.code else ""
        line = f"  {symbol} L{error.line}: {error.message}{code}"
        if error.suggestion:
            line += f"\n      {self._style(error.suggestion, 'dim')}"
        return line

    def _format_error_counts(self, errors: list[ParseError]) -> list[str]:
        counts = Counter(error.code for error in errors if error.code)
        lines = [self._style("\nBy code", "bold")]
        for code, count in sorted(counts.items()):
            description = get_error_description(code) or "Unknown error"
            lines.append(f"  {code}  {description}: {count} row(s)")
        return lines

    def _format_summary(self, result: ParseResult) -> str:
        summary = (
            f"{result.success_rows}/{result.total_rows} row(s) parsed, "
            f"total {result.total_amount}"
        )
        if result.error_rows:
            return self._style(f"{summary}, {result.error_rows} error(s)", "red")
        return self._style(f"{self._success_symbol} {summary}", "green")

    def _style(self, text: str, style: str) -> str:
        """Apply style to text if colors are enabled."""
        if not self._use_color:
            return text

        # ANSI color codes
        codes = {
            "bold": "\033[1m",
            "dim": "\033[2m",
            "red": "\033[31m",
            "green": "\033[32m",
            "yellow": "\033[33m",
            "bold red": "\033[1;31m",
        }
        reset = "\033[0m"

        code = codes.get(style, "")
        if code:
            return f"{code}{text}{reset}"
        return text
