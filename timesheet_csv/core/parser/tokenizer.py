"""
CSV tokenizer for timesheet files.

The dialect decides the delimiter (comma, tab or semicolon) and how strict
quoting is:
- Quote character: double quote (")
- Escape: doubled quotes ("")
- Line terminator: LF, CRLF or CR; any of them may appear inside quotes
- Leading spaces before a field are skipped
- Strict dialects reject stray quotes, lazy ones (excel) keep them as text

This module implements a state-machine tokenizer over already-decoded text.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

from .models import Dialect

if TYPE_CHECKING:
    from collections.abc import Iterator


class TokenizerState(Enum):
    """State of the tokenizer state machine."""

    FIELD_START = auto()  # At start of a field
    IN_UNQUOTED = auto()  # Inside an unquoted field
    IN_QUOTED = auto()  # Inside a quoted field
    QUOTE_IN_QUOTED = auto()  # Just saw a quote inside a quoted field


class TokenizerError(Exception):
    """Error during tokenization."""

    def __init__(self, message: str, line: int, column: int) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"line {line}, column {column}: {message}")


def tokenize_line(
    line: str,
    dialect: Dialect | None = None,
) -> list[str]:
    """
    Tokenize the first record of ``line`` into fields.

    Quoting is always read lazily here, so this never raises.

    Args:
        line: The text to tokenize
        dialect: CSV dialect (defaults to comma-separated)

    Returns:
        List of field values (unquoted and unescaped)
    """
    if dialect is None:
        dialect = Dialect()
    lazy = dialect.model_copy(update={"lazy_quotes": True})

    for fields, _, _ in tokenize_stream(line, lazy):
        return fields
    return []


def tokenize_stream(
    text: str,
    dialect: Dialect | None = None,
) -> Iterator[tuple[list[str], int, int]]:
    """
    Tokenize a text stream into records (rows).

    Handles multi-line records where line breaks appear inside quoted fields.
    Blank lines produce no record.

    Args:
        text: The full text to tokenize
        dialect: CSV dialect (defaults to comma-separated)

    Yields:
        Tuples of (fields, start_line, end_line)
        start_line and end_line are 1-indexed line numbers

    Raises:
        TokenizerError: On malformed quoting when the dialect is strict
    """
    if dialect is None:
        dialect = Dialect()

    delimiter = dialect.delimiter
    quotechar = dialect.quotechar
    lazy = dialect.lazy_quotes
    trim = dialect.trim_leading_space

    fields: list[str] = []
    field_buffer: list[str] = []
    state = TokenizerState.FIELD_START

    line_no = 1
    column = 0
    record_start_line = 1

    i = 0
    while i < len(text):
        char = text[i]
        next_char = text[i + 1] if i + 1 < len(text) else None
        column += 1

        if char in ("\r", "\n") and state != TokenizerState.IN_QUOTED:
            # End of record
            fields.append("".join(field_buffer))
            if fields != [""]:
                yield fields, record_start_line, line_no
            fields = []
            field_buffer = []
            state = TokenizerState.FIELD_START
            # Treat CRLF as a single terminator
            if char == "\r" and next_char == "\n":
                i += 1
            line_no += 1
            column = 0
            record_start_line = line_no
            i += 1
            continue

        if state == TokenizerState.FIELD_START:
            if char == quotechar:
                state = TokenizerState.IN_QUOTED
            elif char == delimiter:
                fields.append("")
            elif trim and char.isspace():
                pass
            else:
                field_buffer.append(char)
                state = TokenizerState.IN_UNQUOTED

        elif state == TokenizerState.IN_UNQUOTED:
            if char == delimiter:
                fields.append("".join(field_buffer))
                field_buffer = []
                state = TokenizerState.FIELD_START
            elif char == quotechar and not lazy:
                raise TokenizerError('bare " in non-quoted field', line_no, column)
            else:
                field_buffer.append(char)

        elif state == TokenizerState.IN_QUOTED:
            if char == quotechar:
                state = TokenizerState.QUOTE_IN_QUOTED
            else:
                # Include everything, including line breaks (multi-line field)
                field_buffer.append(char)
                if char == "\n" or (char == "\r" and next_char != "\n"):
                    line_no += 1
                    column = 0

        elif state == TokenizerState.QUOTE_IN_QUOTED:
            if char == quotechar:
                # Escaped quote
                field_buffer.append(quotechar)
                state = TokenizerState.IN_QUOTED
            elif char == delimiter:
                fields.append("".join(field_buffer))
                field_buffer = []
                state = TokenizerState.FIELD_START
            elif not lazy:
                raise TokenizerError('extraneous or missing " in quoted field', line_no, column)
            else:
                # Content after closing quote
                field_buffer.append(char)
                state = TokenizerState.IN_UNQUOTED

        i += 1

    if state == TokenizerState.IN_QUOTED and not lazy:
        raise TokenizerError("quoted field is never closed", record_start_line, column)

    # Handle final record if not empty
    if field_buffer or fields or state != TokenizerState.FIELD_START:
        fields.append("".join(field_buffer))
        if fields != [""]:
            yield fields, record_start_line, line_no
