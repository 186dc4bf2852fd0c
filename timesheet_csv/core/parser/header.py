"""
Header mapping for timesheet files.

Maps the header row's column labels to the four canonical field keys.
"""

from __future__ import annotations

import logging

from .errors import ErrorKind, TimesheetError

logger = logging.getLogger(__name__)

# Known header spellings -> canonical field key
HEADER_ALIASES: dict[str, str] = {
    "date": "date",
    "work_date": "date",
    "day": "date",
    "hours": "hours",
    "time": "hours",
    "duration": "hours",
    "hours_worked": "hours",
    "rate": "rate",
    "hourly_rate": "rate",
    "hour_rate": "rate",
    "billing_rate": "rate",
    "description": "description",
    "desc": "description",
    "task": "description",
    "work_description": "description",
    "notes": "description",
}

REQUIRED_FIELDS: tuple[str, ...] = ("date", "hours", "rate", "description")


def normalize_header(raw: str | bytes) -> str:
    """
    Normalize a header label to its canonical key.

    Trims and lowercases the label, then resolves known aliases. Unknown
    labels come back trimmed and lowercased. Bytes are decoded as UTF-8 with
    invalid sequences replaced.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    normalized = raw.strip().lower()
    return HEADER_ALIASES.get(normalized, normalized)


def build_header_map(header_row: list[str]) -> dict[str, int]:
    """
    Map normalized header labels to zero-based column indices.

    When two labels normalize to the same key, the later column wins.

    Raises:
        TimesheetError: If any required field is missing from the header
    """
    header_map: dict[str, int] = {}

    for index, label in enumerate(header_row):
        key = normalize_header(label)
        if key in header_map:
            logger.debug(
                "duplicate header %r for %s: column %d replaces %d",
                label,
                key,
                index,
                header_map[key],
            )
        header_map[key] = index

    missing = [field for field in REQUIRED_FIELDS if field not in header_map]
    if missing:
        raise TimesheetError(
            ErrorKind.MISSING_HEADER_FIELD,
            f"required field not found in header: {', '.join(missing)}",
            line=1,
            field=missing[0],
        )

    logger.debug("header processed: %d fields, map=%s", len(header_map), header_map)
    return header_map
