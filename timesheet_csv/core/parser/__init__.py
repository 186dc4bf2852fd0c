"""
Timesheet Parser Core.

Public API for parsing delimited timesheet files into work items.

Usage:
    from timesheet_csv.core.parser import parse_timesheet, ParseOptions

    result = parse_timesheet(open("hours.csv", "rb"), ParseOptions(continue_on_error=True))
    print(f"{result.success_rows}/{result.total_rows} rows parsed")

    for item in result.work_items:
        print(f"{item.date}: {item.hours}h x {item.rate} = {item.total}")

API Functions:
    parse_timesheet(source, options) -> ParseResult
    detect_format(source) -> FormatInfo
    validate_format(source) -> None
    analyze_format(content) -> FormatInfo
    parse_date(text) -> date
    normalize_header(raw) -> str
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .dates import DATE_LAYOUTS, add_months, expand_two_digit_year, find_layout, parse_date
from .detector import analyze_format, is_supported_format
from .encoding import Source, detect_encoding, read_source
from .engine import TimesheetParser
from .errors import ErrorKind, ParseError, TimesheetError, get_error_description
from .header import HEADER_ALIASES, REQUIRED_FIELDS, build_header_map, normalize_header
from .models import (
    CANONICAL_FIELDS,
    SUPPORTED_FORMATS,
    Dialect,
    FormatInfo,
    FormatName,
    HeaderMap,
    ParseOptions,
    ParseResult,
    WorkItem,
)
from .rows import IdGenerator, UuidGenerator, parse_row
from .tokenizer import TokenizerError, tokenize_line, tokenize_stream

if TYPE_CHECKING:
    from timesheet_csv.core.cancel import CancelToken


def parse_timesheet(
    source: Source,
    options: ParseOptions | None = None,
    *,
    cancel: CancelToken | None = None,
    max_bytes: int | None = None,
) -> ParseResult:
    """
    Parse a timesheet with the default collaborators.

    See ``TimesheetParser.parse_timesheet``.
    """
    return TimesheetParser().parse_timesheet(
        source, options, cancel=cancel, max_bytes=max_bytes
    )


def detect_format(
    source: Source,
    *,
    cancel: CancelToken | None = None,
    max_bytes: int | None = None,
) -> FormatInfo:
    """Detect the format of a timesheet source."""
    return TimesheetParser().detect_format(source, cancel=cancel, max_bytes=max_bytes)


def validate_format(
    source: Source,
    *,
    cancel: CancelToken | None = None,
    max_bytes: int | None = None,
) -> None:
    """Check that a timesheet source is in a supported format."""
    TimesheetParser().validate_format(source, cancel=cancel, max_bytes=max_bytes)


# =============================================================================
# Public API Exports
# =============================================================================

__all__ = [
    "CANONICAL_FIELDS",
    "DATE_LAYOUTS",
    "HEADER_ALIASES",
    "REQUIRED_FIELDS",
    "SUPPORTED_FORMATS",
    # Models
    "Dialect",
    "ErrorKind",
    "FormatInfo",
    "FormatName",
    "HeaderMap",
    "IdGenerator",
    "ParseError",
    "ParseOptions",
    "ParseResult",
    "Source",
    "TimesheetError",
    # Engine
    "TimesheetParser",
    "TokenizerError",
    "UuidGenerator",
    "WorkItem",
    "add_months",
    "analyze_format",
    "build_header_map",
    "detect_encoding",
    "detect_format",
    "expand_two_digit_year",
    "find_layout",
    "get_error_description",
    "is_supported_format",
    "normalize_header",
    "parse_date",
    "parse_row",
    # Main functions
    "parse_timesheet",
    "read_source",
    "tokenize_line",
    "tokenize_stream",
    "validate_format",
]
