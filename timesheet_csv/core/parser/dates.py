"""
Date interpretation for timesheet rows.

Timesheets carry dates in many spellings: ISO, US and EU slash dates, month
names, 2-digit years and dates with no year at all. Layouts are tried in a
fixed order and the first match wins, so "01/02/2024" is read as US
(January 2) and only "13/02/2024" falls through to the EU layout.

Year policy:
- 2-digit years: 00-50 -> 2000-2050, 51-99 -> 1951-1999
- No year: the current year, unless that date is more than 6 months after
  "now", in which case the previous year. "Dec 15" entered in January is
  last December, not next December.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum, auto

from .errors import ErrorKind, TimesheetError

# 2-digit years up to this value belong to the 2000s
TWO_DIGIT_YEAR_PIVOT = 50

# No-year dates further than this many months ahead roll back one year
NO_YEAR_FUTURE_MONTHS = 6

MONTHS_SHORT: dict[str, int] = {
    name.lower(): index for index, name in enumerate(calendar.month_abbr) if name
}
MONTHS_LONG: dict[str, int] = {
    name.lower(): index for index, name in enumerate(calendar.month_name) if name
}


class YearStyle(Enum):
    """How a layout spells the year."""

    FULL = auto()
    TWO_DIGIT = auto()
    NONE = auto()


@dataclass(frozen=True)
class DateLayout:
    """One accepted date spelling."""

    name: str
    pattern: re.Pattern[str]
    year_style: YearStyle
    month_names: dict[str, int] | None = None


def _layout(
    name: str,
    pattern: str,
    year_style: YearStyle,
    month_names: dict[str, int] | None = None,
) -> DateLayout:
    return DateLayout(name, re.compile(pattern, re.ASCII), year_style, month_names)


_Y4 = r"(?P<year>[0-9]{4})"
_Y2 = r"(?P<year>[0-9]{2})"
_MM = r"(?P<month>[0-9]{2})"
_DD = r"(?P<day>[0-9]{2})"
_M = r"(?P<month>[0-9]{1,2})"
_D = r"(?P<day>[0-9]{1,2})"
_MON = r"(?P<mon>[A-Za-z]{3})"
_MONTH = r"(?P<mon>[A-Za-z]{3,9})"
_TIME = r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"

FULL_YEAR_LAYOUTS: tuple[DateLayout, ...] = (
    _layout("YYYY-MM-DD", rf"{_Y4}-{_MM}-{_DD}", YearStyle.FULL),
    _layout("MM/DD/YYYY", rf"{_MM}/{_DD}/{_Y4}", YearStyle.FULL),
    _layout("DD/MM/YYYY", rf"{_DD}/{_MM}/{_Y4}", YearStyle.FULL),
    _layout("YYYY/MM/DD", rf"{_Y4}/{_MM}/{_DD}", YearStyle.FULL),
    _layout("Mon D, YYYY", rf"{_MON} +{_D}, +{_Y4}", YearStyle.FULL, MONTHS_SHORT),
    _layout("Month D, YYYY", rf"{_MONTH} +{_D}, +{_Y4}", YearStyle.FULL, MONTHS_LONG),
    _layout("YYYY-MM-DD HH:MM:SS", rf"{_Y4}-{_MM}-{_DD} +{_TIME}", YearStyle.FULL),
)

TWO_DIGIT_YEAR_LAYOUTS: tuple[DateLayout, ...] = (
    _layout("MM/DD/YY", rf"{_MM}/{_DD}/{_Y2}", YearStyle.TWO_DIGIT),
    _layout("DD/MM/YY", rf"{_DD}/{_MM}/{_Y2}", YearStyle.TWO_DIGIT),
    _layout("M/D/YY", rf"{_M}/{_D}/{_Y2}", YearStyle.TWO_DIGIT),
    _layout("D/M/YY", rf"{_D}/{_M}/{_Y2}", YearStyle.TWO_DIGIT),
    _layout("YY-MM-DD", rf"{_Y2}-{_MM}-{_DD}", YearStyle.TWO_DIGIT),
)

NO_YEAR_LAYOUTS: tuple[DateLayout, ...] = (
    _layout("MM/DD", rf"{_MM}/{_DD}", YearStyle.NONE),
    _layout("M/D", rf"{_M}/{_D}", YearStyle.NONE),
    _layout("Mon D", rf"{_MON} +{_D}", YearStyle.NONE, MONTHS_SHORT),
)

DATE_LAYOUTS: tuple[DateLayout, ...] = (
    FULL_YEAR_LAYOUTS + TWO_DIGIT_YEAR_LAYOUTS + NO_YEAR_LAYOUTS
)


def find_layout(name: str | None) -> DateLayout | None:
    """Look up a layout by name, case-insensitively."""
    if not name:
        return None
    wanted = name.strip().upper()
    for layout in DATE_LAYOUTS:
        if layout.name.upper() == wanted:
            return layout
    return None


def parse_date(
    text: str,
    *,
    now: datetime | None = None,
    prefer: str | None = None,
) -> date:
    """
    Parse a free-form date string into a calendar date.

    Args:
        text: Raw date text; surrounding whitespace is ignored
        now: Reference time for no-year inference (defaults to datetime.now())
        prefer: Optional layout name tried before the fixed order

    Returns:
        The parsed date

    Raises:
        TimesheetError: INVALID_DATE for empty input or an impossible
            inferred date, UNSUPPORTED_DATE_FORMAT if no layout matches
    """
    text = text.strip()
    if not text:
        raise TimesheetError(ErrorKind.INVALID_DATE, "date is empty", value=text)

    if now is None:
        now = datetime.now()

    layouts = DATE_LAYOUTS
    preferred = find_layout(prefer)
    if preferred is not None:
        layouts = (preferred,) + tuple(lo for lo in DATE_LAYOUTS if lo is not preferred)

    for layout in layouts:
        fields = _match(layout, text)
        if fields is None:
            continue

        year, month, day = fields
        if layout.year_style == YearStyle.NONE:
            return _infer_year(month, day, now, text)

        if layout.year_style == YearStyle.TWO_DIGIT:
            year = expand_two_digit_year(year)

        try:
            return date(year, month, day)
        except ValueError:
            continue

    raise TimesheetError(
        ErrorKind.UNSUPPORTED_DATE_FORMAT, "unsupported date format", value=text
    )


def expand_two_digit_year(year: int) -> int:
    """Map a 2-digit year: 00-50 -> 2000-2050, 51-99 -> 1951-1999."""
    if year <= TWO_DIGIT_YEAR_PIVOT:
        return 2000 + year
    return 1900 + year


def add_months(moment: datetime, months: int) -> datetime:
    """
    Add calendar months, carrying day overflow into the next month.

    Aug 31 + 6 months is Mar 3 (or Mar 2 in leap years), not Feb 28.
    """
    total = moment.month - 1 + months
    year = moment.year + total // 12
    month = total % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    if moment.day <= last_day:
        return moment.replace(year=year, month=month)
    overflow = moment.day - last_day
    return moment.replace(year=year, month=month, day=last_day) + timedelta(days=overflow)


def _match(layout: DateLayout, text: str) -> tuple[int, int, int] | None:
    """Match ``text`` against ``layout``; returns (year, month, day) or None."""
    m = layout.pattern.fullmatch(text)
    if m is None:
        return None

    groups = m.groupdict()

    if layout.month_names is not None:
        month = layout.month_names.get(groups["mon"].lower())
        if month is None:
            return None
    else:
        month = int(groups["month"])

    if groups.get("hour") is not None and (
        int(groups["hour"]) > 23 or int(groups["minute"]) > 59 or int(groups["second"]) > 59
    ):
        return None

    day = int(groups["day"])
    year = int(groups["year"]) if groups.get("year") is not None else 0

    if layout.year_style == YearStyle.NONE:
        # Without a year, accept any day that exists in some year (Feb 29 included)
        if not 1 <= month <= 12 or not 1 <= day <= calendar.monthrange(2000, month)[1]:
            return None

    return year, month, day


def _infer_year(month: int, day: int, now: datetime, text: str) -> date:
    """Place a no-year date in the current or previous year."""
    try:
        candidate = date(now.year, month, day)
    except ValueError:
        raise TimesheetError(
            ErrorKind.INVALID_DATE,
            f"day {day} does not exist in month {month} of {now.year}",
            value=text,
        ) from None

    limit = add_months(now, NO_YEAR_FUTURE_MONTHS).date()
    if candidate > limit:
        try:
            candidate = candidate.replace(year=candidate.year - 1)
        except ValueError:
            raise TimesheetError(
                ErrorKind.INVALID_DATE,
                f"day {day} does not exist in month {month} of {now.year - 1}",
                value=text,
            ) from None

    return candidate
