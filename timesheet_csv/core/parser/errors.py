"""
Parser error models.

This module defines the error taxonomy for the timesheet parser.
All errors carry a code from the TSC-XXX-NNN taxonomy.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ErrorKind(Enum):
    """
    Closed set of parser and validator error kinds.

    Error domains:
    - TSC-IO-*: Reading the input
    - TSC-FMT-*: Format detection
    - TSC-HDR-*: Header mapping
    - TSC-ROW-*: Row structure
    - TSC-FIELD-*: Field extraction and conversion
    - TSC-DATE-*: Date interpretation
    - TSC-RULE-*: Validation rules
    """

    EMPTY_INPUT = "TSC-IO-001"
    READ_FAILED = "TSC-IO-002"
    INPUT_TOO_LARGE = "TSC-IO-003"
    EMPTY_CONTENT = "TSC-FMT-001"
    AMBIGUOUS_FORMAT = "TSC-FMT-002"
    NO_DELIMITERS = "TSC-FMT-003"
    TOO_FEW_COLUMNS = "TSC-FMT-004"
    TOO_MANY_COLUMNS = "TSC-FMT-005"
    UNSUPPORTED_FORMAT = "TSC-FMT-006"
    MISSING_HEADER_FIELD = "TSC-HDR-001"
    EMPTY_ROW = "TSC-ROW-001"
    ROW_NO_DATA = "TSC-ROW-002"
    ROW_FAILED = "TSC-ROW-003"
    FIELD_MISSING_IN_ROW = "TSC-FIELD-001"
    FIELD_EMPTY = "TSC-FIELD-002"
    INVALID_NUMBER = "TSC-FIELD-003"
    INVALID_DATE = "TSC-DATE-001"
    UNSUPPORTED_DATE_FORMAT = "TSC-DATE-002"
    RULE_VIOLATION = "TSC-RULE-001"
    BATCH_VIOLATION = "TSC-RULE-002"

    @property
    def code(self) -> str:
        return self.value

    @property
    def structural(self) -> bool:
        """True for kinds that abort a parse before any row is processed."""
        return self in _STRUCTURAL_KINDS


_STRUCTURAL_KINDS = frozenset(
    {
        ErrorKind.EMPTY_INPUT,
        ErrorKind.READ_FAILED,
        ErrorKind.INPUT_TOO_LARGE,
        ErrorKind.EMPTY_CONTENT,
        ErrorKind.AMBIGUOUS_FORMAT,
        ErrorKind.NO_DELIMITERS,
        ErrorKind.TOO_FEW_COLUMNS,
        ErrorKind.TOO_MANY_COLUMNS,
        ErrorKind.UNSUPPORTED_FORMAT,
        ErrorKind.MISSING_HEADER_FIELD,
    }
)


class TimesheetError(Exception):
    """
    Error raised by the parser and the validator.

    The message is user-displayable on its own; ``line``, ``field`` and
    ``value`` carry the context separately for structured reporting.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        line: int | None = None,
        field: str | None = None,
        value: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.line = line
        self.field = field
        self.value = value
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.kind.code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"TimesheetError({self.kind.name}, {self.message!r})"


class ParseError(BaseModel, frozen=True):
    """A failed data row, reported instead of a work item."""

    line: int = Field(ge=1, description="1-based line where the row starts")
    column: str | None = Field(default=None, description="Canonical field name, if known")
    value: str | None = Field(default=None, description="The offending raw value")
    message: str
    suggestion: str | None = None
    code: str | None = Field(default=None, description="Error code, e.g. 'TSC-FIELD-003'")
    row: list[str] = Field(default_factory=list, description="The raw row")

    @classmethod
    def from_error(
        cls,
        error: TimesheetError,
        *,
        line: int,
        row: list[str],
        message: str | None = None,
    ) -> ParseError:
        """Build a row report from a raised TimesheetError."""
        return cls(
            line=max(line, 1),
            column=error.field,
            value=error.value,
            message=message or error.message,
            suggestion=SUGGESTIONS.get(error.kind),
            code=error.code,
            row=list(row),
        )

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


# =============================================================================
# Error Codes Registry
# =============================================================================

ERROR_DESCRIPTIONS: dict[str, str] = {
    "TSC-IO-001": "Input is empty",
    "TSC-IO-002": "Input could not be read as delimited text",
    "TSC-IO-003": "Input exceeds the configured size limit",
    "TSC-FMT-001": "Cannot detect format of empty content",
    "TSC-FMT-002": "Ambiguous format: multiple delimiter types detected",
    "TSC-FMT-003": "No delimiters found",
    "TSC-FMT-004": "Too few columns for work items",
    "TSC-FMT-005": "Too many columns",
    "TSC-FMT-006": "Unsupported format",
    "TSC-HDR-001": "Required field not found in header",
    "TSC-ROW-001": "Empty row",
    "TSC-ROW-002": "Row contains no data",
    "TSC-ROW-003": "Row failed to parse or validate",
    "TSC-FIELD-001": "Field missing in row",
    "TSC-FIELD-002": "Field is empty",
    "TSC-FIELD-003": "Invalid decimal number",
    "TSC-DATE-001": "Invalid date",
    "TSC-DATE-002": "Unsupported date format",
    "TSC-RULE-001": "Validation rule violated",
    "TSC-RULE-002": "Batch validation failed",
}

SUGGESTIONS: dict[ErrorKind, str] = {
    ErrorKind.FIELD_MISSING_IN_ROW: "Check that the row has a value for every header column",
    ErrorKind.FIELD_EMPTY: "Fill in the empty field or remove the row",
    ErrorKind.INVALID_NUMBER: "Use plain decimal numbers with a dot, e.g. 7.5",
    ErrorKind.INVALID_DATE: "Use YYYY-MM-DD dates, e.g. 2024-01-15",
    ErrorKind.UNSUPPORTED_DATE_FORMAT: "Use YYYY-MM-DD dates, e.g. 2024-01-15",
    ErrorKind.EMPTY_ROW: "Remove the empty row or enable skipping empty rows",
    ErrorKind.ROW_NO_DATA: "Remove the empty row or enable skipping empty rows",
    ErrorKind.RULE_VIOLATION: "Check for unusual values (very high hours, extreme rates)",
}


def get_error_description(code: str) -> str | None:
    """Get the description for an error code."""
    return ERROR_DESCRIPTIONS.get(code)
