"""
Encoding detection and input reading.

Timesheet exports arrive as:
- UTF-8 with or without BOM (most tools)
- Windows-1252 (older spreadsheet exports)
- anything else charset-normalizer can recognise

This module turns any supported source into text without ever raising on
bad byte sequences; invalid sequences are replaced.
"""

from __future__ import annotations

from typing import IO, Union

from charset_normalizer import from_bytes

from .errors import ErrorKind, TimesheetError

# Size of data to use for encoding detection (8KB is usually sufficient)
DETECTION_SAMPLE_SIZE = 8192

Source = Union[str, bytes, bytearray, IO[str], IO[bytes]]


def detect_encoding(data: bytes) -> str:
    """
    Detect encoding of raw timesheet data.

    Detection priority:
    1. UTF-8 / UTF-16 BOM (explicit marker)
    2. charset-normalizer detection
    3. Fallback to UTF-8 if it decodes, else Windows-1252

    Returns:
        Python codec name, e.g. "utf-8-sig", "utf-8" or "windows-1252"
    """
    if data.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    if data.startswith(b"\xff\xfe") or data.startswith(b"\xfe\xff"):
        return "utf-16"

    results = from_bytes(data[:DETECTION_SAMPLE_SIZE])

    if results:
        best = results.best()
        if best is not None:
            encoding = best.encoding.lower()

            if encoding in ("ascii", "utf-8", "utf8", "utf_8"):
                return "utf-8"

            if encoding in ("cp1252", "windows-1252", "latin-1", "latin_1", "iso-8859-1"):
                return "windows-1252"

            return encoding

    try:
        data[:DETECTION_SAMPLE_SIZE].decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        return "windows-1252"


def decode_with_fallback(data: bytes, encoding: str) -> str:
    """
    Decode bytes with encoding, using replacement for invalid sequences.

    Unknown codec names fall back to UTF-8 with replacement.
    """
    try:
        return data.decode(encoding)
    except UnicodeDecodeError:
        return data.decode(encoding, errors="replace")
    except LookupError:
        return data.decode("utf-8", errors="replace")


def read_source(source: Source, *, max_bytes: int | None = None) -> tuple[str, str]:
    """
    Read a whole source into text.

    Args:
        source: Text, bytes, or a text/binary stream
        max_bytes: Maximum input size in bytes (None = unlimited)

    Returns:
        Tuple of (text, encoding name)

    Raises:
        TimesheetError: READ_FAILED if the stream cannot be read,
            INPUT_TOO_LARGE if the input exceeds ``max_bytes``
    """
    if isinstance(source, (str, bytes, bytearray)):
        raw: str | bytes = bytes(source) if isinstance(source, bytearray) else source
    else:
        try:
            if max_bytes is not None and max_bytes > 0:
                raw = source.read(max_bytes + 1)
            else:
                raw = source.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TimesheetError(
                ErrorKind.READ_FAILED, f"failed to read CSV data: {e}"
            ) from e

    if isinstance(raw, str):
        size = len(raw.encode("utf-8", errors="replace"))
        if max_bytes is not None and max_bytes > 0 and size > max_bytes:
            raise _too_large(max_bytes)
        return raw.removeprefix("\ufeff"), "utf-8"

    if max_bytes is not None and max_bytes > 0 and len(raw) > max_bytes:
        raise _too_large(max_bytes)

    encoding = detect_encoding(raw)
    text = decode_with_fallback(raw, encoding)
    return text.removeprefix("\ufeff"), encoding


def _too_large(max_bytes: int) -> TimesheetError:
    return TimesheetError(
        ErrorKind.INPUT_TOO_LARGE,
        f"input exceeds maximum size of {max_bytes} bytes",
    )
