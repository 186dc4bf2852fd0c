"""Tests for row parsing."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from timesheet_csv.core.cancel import CancelToken, OperationCancelled
from timesheet_csv.core.parser import ErrorKind, TimesheetError, UuidGenerator, parse_row
from timesheet_csv.core.parser.rows import get_field_value, parse_decimal

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.conftest import CountingIdGenerator

HEADER_MAP = {"date": 0, "hours": 1, "rate": 2, "description": 3}


class TestGetFieldValue:
    """Tests for get_field_value function."""

    def test_trims(self) -> None:
        assert get_field_value(["  2024-01-15 ", "8"], HEADER_MAP, "date") == "2024-01-15"

    def test_missing(self) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            get_field_value(["2024-01-15", "8"], HEADER_MAP, "rate")
        assert exc_info.value.kind == ErrorKind.FIELD_MISSING_IN_ROW
        assert str(exc_info.value) == "field missing in row: rate"

    def test_blank(self) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            get_field_value(["2024-01-15", "   "], HEADER_MAP, "hours")
        assert exc_info.value.kind == ErrorKind.FIELD_EMPTY
        assert exc_info.value.field == "hours"


class TestParseDecimal:
    """Tests for parse_decimal function."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("8", Decimal("8")),
            ("7.25", Decimal("7.25")),
            ("-5.0", Decimal("-5.0")),
            ("1e2", Decimal("100")),
            ("+3", Decimal("3")),
            (".5", Decimal("0.5")),
            ("2.", Decimal("2")),
        ],
    )
    def test_valid(self, raw: str, expected: Decimal) -> None:
        assert parse_decimal(raw, "hours") == expected

    @pytest.mark.parametrize(
        "raw",
        ["abc", "7,5", "NaN", "Infinity", "8h", "1_0", "\uff18", "\u0668", "1e", "."],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_decimal(raw, "hours")
        assert exc_info.value.kind == ErrorKind.INVALID_NUMBER
        assert f"invalid hours '{raw}'" in str(exc_info.value)
        assert exc_info.value.value == raw


class TestParseRow:
    """Tests for parse_row function."""

    def test_valid_row(
        self, id_generator: CountingIdGenerator, fixed_clock: Callable[[], datetime]
    ) -> None:
        item = parse_row(
            ["2024-01-15", "8.0", "100.0", "Development work"],
            HEADER_MAP,
            2,
            id_generator=id_generator,
            clock=fixed_clock,
        )
        assert item.id == "item-1"
        assert item.date == date(2024, 1, 15)
        assert item.hours == Decimal("8.0")
        assert item.rate == Decimal("100.0")
        assert item.description == "Development work"
        assert item.total == Decimal("800.00")
        assert item.created_at == fixed_clock()

    def test_total_rounds_half_up(self, id_generator: CountingIdGenerator) -> None:
        item = parse_row(
            ["2024-01-15", "0.05", "0.5", "Rounding check"],
            HEADER_MAP,
            2,
            id_generator=id_generator,
        )
        assert item.total == Decimal("0.03")

    def test_date_format_hint(
        self, id_generator: CountingIdGenerator, fixed_clock: Callable[[], datetime]
    ) -> None:
        item = parse_row(
            ["01/02/2024", "1", "1", "Hinted date"],
            HEADER_MAP,
            2,
            id_generator=id_generator,
            clock=fixed_clock,
            date_format="DD/MM/YYYY",
        )
        assert item.date == date(2024, 2, 1)

    def test_ids_are_unique(self) -> None:
        generator = UuidGenerator()
        row = ["2024-01-15", "1", "1", "Unique ids"]
        ids = {parse_row(row, HEADER_MAP, 2, id_generator=generator).id for _ in range(20)}
        assert len(ids) == 20

    def test_empty_row(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row([], HEADER_MAP, 7, id_generator=id_generator)
        assert exc_info.value.kind == ErrorKind.EMPTY_ROW
        assert exc_info.value.line == 7

    def test_invalid_date_names_the_raw_value(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(["someday", "8", "100", "Work log"], HEADER_MAP, 3, id_generator=id_generator)
        error = exc_info.value
        assert error.kind == ErrorKind.UNSUPPORTED_DATE_FORMAT
        assert str(error) == "invalid date 'someday': unsupported date format"
        assert error.field == "date"
        assert error.line == 3

    def test_invalid_hours(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(
                ["2024-01-15", "abc", "100", "Work log"], HEADER_MAP, 4, id_generator=id_generator
            )
        assert exc_info.value.kind == ErrorKind.INVALID_NUMBER
        assert exc_info.value.line == 4
        assert "hours" in str(exc_info.value)

    def test_missing_description(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(["2024-01-15", "8", "100"], HEADER_MAP, 5, id_generator=id_generator)
        assert exc_info.value.kind == ErrorKind.FIELD_MISSING_IN_ROW
        assert exc_info.value.field == "description"

    def test_huge_exponent(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(
                ["2024-01-15", "1e999999", "1", "Overflow"],
                HEADER_MAP,
                2,
                id_generator=id_generator,
            )
        assert exc_info.value.kind == ErrorKind.INVALID_NUMBER
        assert exc_info.value.field == "hours"
        assert exc_info.value.value == "1e999999"

    def test_huge_rate_blames_rate(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(
                ["2024-01-15", "8", "1e40", "Client API work"],
                HEADER_MAP,
                2,
                id_generator=id_generator,
            )
        error = exc_info.value
        assert error.kind == ErrorKind.INVALID_NUMBER
        assert error.field == "rate"
        assert error.value == "1e40"
        assert str(error) == "invalid rate '1e40': value out of range"
        assert id_generator.count == 0

    def test_total_out_of_range_names_both_values(
        self, id_generator: CountingIdGenerator
    ) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(
                ["2024-01-15", "1e14", "1e14", "Client API work"],
                HEADER_MAP,
                2,
                id_generator=id_generator,
            )
        error = exc_info.value
        assert error.field == "total"
        assert str(error) == "total out of range for hours '1e14' and rate '1e14'"
        assert error.line == 2

    @pytest.mark.parametrize("hours", ["1_0", "\uff18", "\u0668"])
    def test_non_ascii_or_grouped_hours_rejected(
        self, hours: str, id_generator: CountingIdGenerator
    ) -> None:
        with pytest.raises(TimesheetError) as exc_info:
            parse_row(
                ["2024-01-15", hours, "100", "Client API work"],
                HEADER_MAP,
                2,
                id_generator=id_generator,
            )
        assert exc_info.value.kind == ErrorKind.INVALID_NUMBER
        assert exc_info.value.field == "hours"

    def test_no_id_consumed_on_failure(self, id_generator: CountingIdGenerator) -> None:
        with pytest.raises(TimesheetError):
            parse_row(["2024-01-15", "x", "1", "Broken"], HEADER_MAP, 2, id_generator=id_generator)
        assert id_generator.count == 0

    def test_cancelled(self, id_generator: CountingIdGenerator) -> None:
        token = CancelToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            parse_row(
                ["2024-01-15", "8", "100", "Work log"],
                HEADER_MAP,
                2,
                id_generator=id_generator,
                cancel=token,
            )
