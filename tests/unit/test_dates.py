"""Tests for date interpretation and year inference."""

from __future__ import annotations

import random
import string
from datetime import date, datetime

import pytest

from timesheet_csv.core.parser import (
    DATE_LAYOUTS,
    ErrorKind,
    TimesheetError,
    add_months,
    expand_two_digit_year,
    find_layout,
    parse_date,
)

JAN_10 = datetime(2024, 1, 10, 9, 0, 0)


class TestFullYearLayouts:
    """Dates that spell out a 4-digit year."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("2024-01-15", date(2024, 1, 15)),
            ("01/15/2024", date(2024, 1, 15)),
            ("2024/03/05", date(2024, 3, 5)),
            ("Jan 15, 2024", date(2024, 1, 15)),
            ("jan 5, 2024", date(2024, 1, 5)),
            ("January 15, 2024", date(2024, 1, 15)),
            ("September 1, 2023", date(2023, 9, 1)),
            ("2024-01-15 09:30:00", date(2024, 1, 15)),
            ("  2024-01-15  ", date(2024, 1, 15)),
        ],
    )
    def test_parses(self, text: str, expected: date) -> None:
        assert parse_date(text, now=JAN_10) == expected

    def test_us_layout_wins_when_both_fit(self) -> None:
        """01/02/2024 is January 2, not February 1."""
        assert parse_date("01/02/2024", now=JAN_10) == date(2024, 1, 2)

    def test_eu_layout_when_us_is_impossible(self) -> None:
        assert parse_date("13/02/2024", now=JAN_10) == date(2024, 2, 13)

    def test_invalid_time_is_rejected(self) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_date("2024-01-15 25:00:00", now=JAN_10)
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_DATE_FORMAT

    def test_impossible_day_is_rejected(self) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_date("2024-02-30", now=JAN_10)
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_DATE_FORMAT

    def test_leap_day(self) -> None:
        assert parse_date("2024-02-29", now=JAN_10) == date(2024, 2, 29)


class TestTwoDigitYears:
    """2-digit years split at 50."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("01/15/24", date(2024, 1, 15)),
            ("15/01/24", date(2024, 1, 15)),
            ("1/5/24", date(2024, 1, 5)),
            ("24-01-15", date(2024, 1, 15)),
            ("01/15/00", date(2000, 1, 15)),
            ("01/15/50", date(2050, 1, 15)),
            ("01/15/51", date(1951, 1, 15)),
            ("01/15/99", date(1999, 1, 15)),
        ],
    )
    def test_parses(self, text: str, expected: date) -> None:
        assert parse_date(text, now=JAN_10) == expected

    @pytest.mark.parametrize(
        ("year", "expected"),
        [(0, 2000), (49, 2049), (50, 2050), (51, 1951), (99, 1999)],
    )
    def test_expand(self, year: int, expected: int) -> None:
        assert expand_two_digit_year(year) == expected


class TestNoYearLayouts:
    """Dates without a year are placed relative to now."""

    def test_previous_year_when_far_ahead(self) -> None:
        """9/8 read on January 1 is last September."""
        assert parse_date("9/8", now=datetime(2024, 1, 1)) == date(2023, 9, 8)

    def test_current_year_when_close(self) -> None:
        assert parse_date("03/03", now=JAN_10) == date(2024, 3, 3)

    def test_month_name(self) -> None:
        assert parse_date("Dec 15", now=JAN_10) == date(2023, 12, 15)
        assert parse_date("Mar 3", now=JAN_10) == date(2024, 3, 3)

    def test_exactly_six_months_ahead_stays(self) -> None:
        assert parse_date("07/10", now=JAN_10) == date(2024, 7, 10)

    def test_one_day_past_six_months_rolls_back(self) -> None:
        assert parse_date("07/11", now=JAN_10) == date(2023, 7, 11)

    def test_past_dates_stay_in_current_year(self) -> None:
        assert parse_date("01/02", now=JAN_10) == date(2024, 1, 2)

    def test_feb_29_in_leap_year(self) -> None:
        assert parse_date("02/29", now=datetime(2024, 3, 1)) == date(2024, 2, 29)

    def test_feb_29_in_common_year(self) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_date("02/29", now=datetime(2023, 1, 10))
        assert exc_info.value.kind == ErrorKind.INVALID_DATE
        assert "does not exist" in str(exc_info.value)

    def test_month_13_is_unsupported(self) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_date("13/45", now=JAN_10)
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_DATE_FORMAT


class TestPreferredLayout:
    """A layout hint is tried first."""

    def test_hint_reorders(self) -> None:
        assert parse_date("01/02/2024", now=JAN_10, prefer="DD/MM/YYYY") == date(2024, 2, 1)

    def test_hint_is_case_insensitive(self) -> None:
        assert parse_date("01/02/2024", now=JAN_10, prefer="dd/mm/yyyy") == date(2024, 2, 1)

    def test_non_matching_hint_falls_back(self) -> None:
        assert parse_date("2024-01-15", now=JAN_10, prefer="DD/MM/YYYY") == date(2024, 1, 15)

    def test_unknown_hint_is_ignored(self) -> None:
        assert parse_date("01/02/2024", now=JAN_10, prefer="bogus") == date(2024, 1, 2)

    def test_find_layout(self) -> None:
        layout = find_layout("yyyy-mm-dd")
        assert layout is not None
        assert layout.name == "YYYY-MM-DD"
        assert find_layout(None) is None
        assert find_layout("nope") is None

    def test_layout_names_are_unique(self) -> None:
        names = [layout.name for layout in DATE_LAYOUTS]
        assert len(names) == len(set(names))


class TestParseDateErrors:
    """Tests for rejected input."""

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty(self, text: str) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_date(text, now=JAN_10)
        assert exc_info.value.kind == ErrorKind.INVALID_DATE
        assert str(exc_info.value) == "date is empty"

    @pytest.mark.parametrize(
        "text",
        ["yesterday", "15.01.2024", "2024-1-15", "\uff12\uff10\uff12\uff14-01-15"],
    )
    def test_unsupported(self, text: str) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_date(text, now=JAN_10)
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_DATE_FORMAT
        assert exc_info.value.value == text

    def test_deterministic(self) -> None:
        first = parse_date("Dec 15", now=JAN_10)
        assert all(parse_date("Dec 15", now=JAN_10) == first for _ in range(10))

    def test_fuzz_raises_only_timesheet_error(self) -> None:
        rng = random.Random(1337)  # noqa: S311
        alphabet = string.digits * 3 + "/-:, " + "JanFebDecSeptember"

        for _ in range(500):
            text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 20)))
            try:
                result = parse_date(text, now=JAN_10)
            except TimesheetError:
                continue
            assert isinstance(result, date)


class TestAddMonths:
    """Tests for calendar month arithmetic."""

    def test_simple(self) -> None:
        assert add_months(datetime(2024, 1, 10), 6) == datetime(2024, 7, 10)

    def test_negative_crosses_year(self) -> None:
        assert add_months(datetime(2024, 1, 15), -1) == datetime(2023, 12, 15)
        assert add_months(datetime(2024, 3, 15), -24) == datetime(2022, 3, 15)

    def test_day_overflow_carries(self) -> None:
        assert add_months(datetime(2023, 1, 31), 1) == datetime(2023, 3, 3)
        assert add_months(datetime(2023, 8, 31), 6) == datetime(2024, 3, 2)

    def test_keeps_time_of_day(self) -> None:
        assert add_months(JAN_10, 1) == datetime(2024, 2, 10, 9, 0, 0)
