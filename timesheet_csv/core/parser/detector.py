"""
Format detection for timesheet files.

Infers the delimiter from the first line of the content. Only comma, tab and
semicolon are considered; mixing them on the first line is ambiguous and the
caller has to name the format explicitly.
"""

from __future__ import annotations

import re

from .errors import ErrorKind, TimesheetError
from .header import normalize_header
from .models import CANONICAL_FIELDS, SUPPORTED_FORMATS, Dialect, FormatInfo, FormatName
from .tokenizer import tokenize_line

# Candidate delimiters, in tie-break order (comma wins ties)
CANDIDATES: tuple[tuple[str, FormatName], ...] = (
    (",", FormatName.STANDARD),
    ("\t", FormatName.TAB),
    (";", FormatName.SEMICOLON),
)

MIN_COLUMNS = 3
MAX_COLUMNS = 50

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def first_line(content: str) -> str:
    """Return the first line of ``content``, without BOM or surrounding space."""
    return _LINE_BREAK.split(content.removeprefix("\ufeff"), maxsplit=1)[0].strip()


def analyze_format(content: str, encoding: str = "utf-8") -> FormatInfo:
    """
    Detect the delimiter and shape of timesheet content.

    Args:
        content: Decoded file content (only the first line is examined)
        encoding: Encoding the content was decoded with, reported back

    Returns:
        FormatInfo for the detected format

    Raises:
        TimesheetError: If the format cannot be detected unambiguously
    """
    line = first_line(content)
    if not line:
        raise TimesheetError(
            ErrorKind.EMPTY_CONTENT, "cannot detect format of empty content"
        )

    counts = {delimiter: line.count(delimiter) for delimiter, _ in CANDIDATES}

    present = [d for d, count in counts.items() if count > 0]
    if len(present) > 1:
        raise TimesheetError(
            ErrorKind.AMBIGUOUS_FORMAT,
            "ambiguous format: multiple delimiter types detected, specify the format explicitly",
        )
    if not present:
        raise TimesheetError(ErrorKind.NO_DELIMITERS, "no delimiters found")

    column_count = max(counts.values()) + 1
    if column_count < MIN_COLUMNS:
        raise TimesheetError(
            ErrorKind.TOO_FEW_COLUMNS,
            f"too few columns detected ({column_count}), "
            f"need at least {MIN_COLUMNS} for work items",
        )
    if column_count > MAX_COLUMNS:
        raise TimesheetError(
            ErrorKind.TOO_MANY_COLUMNS,
            f"too many columns detected ({column_count}), maximum supported is {MAX_COLUMNS}",
        )

    # Strictly highest count wins; ties keep the earlier candidate (comma)
    delimiter, name = CANDIDATES[0]
    best = -1
    for candidate, candidate_name in CANDIDATES:
        if counts[candidate] > best:
            delimiter, name, best = candidate, candidate_name, counts[candidate]

    cells = tokenize_line(line, Dialect.for_format(name))
    has_header = any(normalize_header(cell) in CANONICAL_FIELDS for cell in cells)

    return FormatInfo(name=name, delimiter=delimiter, has_header=has_header, encoding=encoding)


def is_supported_format(info: FormatInfo) -> bool:
    """Check if the detected format is one the parser can read."""
    return info.name.value in SUPPORTED_FORMATS
