"""
JSON output adapter.

Renders parse results and reports as JSON for machine processing.
Amounts are emitted as strings so no precision is lost.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TextIO

from timesheet_csv.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from timesheet_csv.core.parser.models import FormatInfo, ParseResult
    from timesheet_csv.core.rules.models import ValidationReport


class JsonOutput(OutputAdapter):
    """JSON output adapter."""

    format = OutputFormat.JSON

    def __init__(self, stream: TextIO | None = None, color: bool = False, indent: int = 2):
        super().__init__(stream=stream, color=False)  # Never colorize JSON
        self.indent = indent

    def render_result(self, result: ParseResult) -> str:
        """Render parse result as JSON."""
        return self._dumps(self._result_to_dict(result))

    def render_format(self, info: FormatInfo) -> str:
        """Render format info as JSON."""
        return self._dumps(info.model_dump(mode="json"))

    def render_report(self, report: ValidationReport) -> str:
        """Render validation report as JSON."""
        output: dict[str, Any] = {
            "valid": report.valid,
            "error": report.error,
            "batch_error": report.batch_error,
            "estimated_total": str(report.estimated_total),
            "warnings": [w.model_dump(mode="json") for w in report.warnings],
            "suggestions": list(report.suggestions),
            "parse_result": (
                self._result_to_dict(report.parse_result)
                if report.parse_result is not None
                else None
            ),
        }
        return self._dumps(output)

    def _result_to_dict(self, result: ParseResult) -> dict[str, Any]:
        """Convert parse result to dictionary."""
        return {
            "format": result.format.value,
            "encoding": result.encoding,
            "summary": {
                "total_rows": result.total_rows,
                "success_rows": result.success_rows,
                "error_rows": result.error_rows,
                "total_amount": str(result.total_amount),
            },
            "header_map": dict(result.header_map),
            "work_items": [item.model_dump(mode="json") for item in result.work_items],
            "errors": [error.model_dump(mode="json") for error in result.errors],
        }

    def _dumps(self, output: dict[str, Any]) -> str:
        return json.dumps(output, indent=self.indent, default=str)
