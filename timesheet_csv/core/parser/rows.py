"""
Row parsing.

Turns one raw row into a WorkItem using the header map. A row either
produces a complete WorkItem or raises; partial items never escape.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from decimal import Decimal, DecimalException
from typing import TYPE_CHECKING, Protocol

from timesheet_csv.core.cancel import check_cancelled

from .dates import parse_date
from .errors import ErrorKind, TimesheetError
from .models import CENTS, WorkItem, compute_total

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from timesheet_csv.core.cancel import CancelToken

    from .models import HeaderMap


_NUMBER = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


class IdGenerator(Protocol):
    """Source of work item IDs, unique within a parse session."""

    def generate_id(self) -> str: ...


class UuidGenerator:
    """Default ID generator: random UUID4 strings."""

    def generate_id(self) -> str:
        return str(uuid.uuid4())


def get_field_value(row: Sequence[str], header_map: HeaderMap, field: str) -> str:
    """
    Get the trimmed value of a canonical field.

    Raises:
        TimesheetError: If the column is beyond the row end or the value is blank
    """
    index = header_map[field]
    if index >= len(row):
        raise TimesheetError(
            ErrorKind.FIELD_MISSING_IN_ROW, f"field missing in row: {field}", field=field
        )

    value = row[index].strip()
    if not value:
        raise TimesheetError(ErrorKind.FIELD_EMPTY, f"field is empty: {field}", field=field)

    return value


def parse_decimal(raw: str, field: str) -> Decimal:
    """
    Parse a plain decimal number.

    Only ASCII digits with an optional sign, fraction and exponent are
    accepted; ``Decimal`` alone would also take ``1_0`` and non-ASCII digits.

    Raises:
        TimesheetError: INVALID_NUMBER for non-numeric text
    """
    if not _NUMBER.fullmatch(raw):
        raise TimesheetError(
            ErrorKind.INVALID_NUMBER,
            f"invalid {field} '{raw}': not a valid decimal number",
            field=field,
            value=raw,
        )
    return Decimal(raw)


def _fits_cents(value: Decimal) -> bool:
    try:
        value.quantize(CENTS)
    except DecimalException:
        return False
    return True


def check_amount_range(hours_raw: str, hours: Decimal, rate_raw: str, rate: Decimal) -> None:
    """
    Ensure hours, rate and their total can be expressed in cents.

    Raises:
        TimesheetError: INVALID_NUMBER naming the field that is out of range,
            or ``total`` with both raw values when only the product is
    """
    for field, raw, value in (("hours", hours_raw, hours), ("rate", rate_raw, rate)):
        if not _fits_cents(value):
            raise TimesheetError(
                ErrorKind.INVALID_NUMBER,
                f"invalid {field} '{raw}': value out of range",
                field=field,
                value=raw,
            )

    try:
        compute_total(hours, rate)
    except DecimalException as e:
        raise TimesheetError(
            ErrorKind.INVALID_NUMBER,
            f"total out of range for hours '{hours_raw}' and rate '{rate_raw}'",
            field="total",
            value=f"{hours_raw} * {rate_raw}",
        ) from e


def parse_row(
    row: Sequence[str],
    header_map: HeaderMap,
    line: int,
    *,
    id_generator: IdGenerator,
    clock: Callable[[], datetime] = datetime.now,
    date_format: str | None = None,
    cancel: CancelToken | None = None,
) -> WorkItem:
    """
    Parse one data row into a WorkItem.

    Args:
        row: Raw field values
        header_map: Canonical field -> column index
        line: 1-based line the row starts on (for error context)
        id_generator: Supplies the new item's ID
        clock: Current time, used for year inference and ``created_at``
        date_format: Optional preferred date layout
        cancel: Optional cancellation token

    Returns:
        The parsed WorkItem

    Raises:
        TimesheetError: If any field is missing, blank or unparseable
        OperationCancelled: If ``cancel`` has fired
    """
    check_cancelled(cancel)

    if not row:
        raise TimesheetError(ErrorKind.EMPTY_ROW, "empty row", line=line)

    try:
        date_raw = get_field_value(row, header_map, "date")
        hours_raw = get_field_value(row, header_map, "hours")
        rate_raw = get_field_value(row, header_map, "rate")
        description = get_field_value(row, header_map, "description")

        now = clock()
        try:
            work_date = parse_date(date_raw, now=now, prefer=date_format)
        except TimesheetError as e:
            raise TimesheetError(
                e.kind,
                f"invalid date '{date_raw}': {e.message}",
                field="date",
                value=date_raw,
            ) from e

        hours = parse_decimal(hours_raw, "hours")
        rate = parse_decimal(rate_raw, "rate")
        check_amount_range(hours_raw, hours, rate_raw, rate)

        return WorkItem.create(
            id=id_generator.generate_id(),
            date=work_date,
            hours=hours,
            rate=rate,
            description=description,
            created_at=now,
        )
    except TimesheetError as e:
        e.line = line
        raise
