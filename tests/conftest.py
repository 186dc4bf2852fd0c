"""
Pytest configuration and fixtures for timesheet-csv tests.

Provides fixtures for:
- Sample timesheet files
- A fixed clock, so date rules and year inference are reproducible
- Deterministic work item IDs
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from timesheet_csv.cli.log import reset_logging
from timesheet_csv.core.parser import TimesheetParser
from timesheet_csv.core.rules import WorkItemValidator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

# =============================================================================
# Path Fixtures
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Reference "now" for everything dated in the fixtures (January 2024 work)
FIXED_NOW = datetime(2024, 2, 1, 12, 0, 0)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def valid_timesheet(fixtures_dir: Path) -> Path:
    """Comma-separated file with three valid rows."""
    return fixtures_dir / "valid_timesheet.csv"


@pytest.fixture
def semicolon_timesheet(fixtures_dir: Path) -> Path:
    """Semicolon-separated file using header aliases."""
    return fixtures_dir / "semicolon_timesheet.csv"


@pytest.fixture
def mixed_errors(fixtures_dir: Path) -> Path:
    """Four rows: two valid, one negative hours, one non-numeric hours."""
    return fixtures_dir / "mixed_errors.csv"


@pytest.fixture
def missing_rate(fixtures_dir: Path) -> Path:
    """Header without a rate column."""
    return fixtures_dir / "missing_rate.csv"


@pytest.fixture
def bom_timesheet(fixtures_dir: Path) -> Path:
    """UTF-8 with BOM and CRLF line endings."""
    return fixtures_dir / "bom_timesheet.csv"


@pytest.fixture
def limits_file(fixtures_dir: Path) -> Path:
    """Limits YAML lowering max_hours to 10 and max_rate to 250."""
    return fixtures_dir / "limits.yaml"


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo CLI logging setup so caplog sees package records."""
    yield
    reset_logging()


class CountingIdGenerator:
    """Deterministic IDs: item-1, item-2, ..."""

    def __init__(self) -> None:
        self.count = 0

    def generate_id(self) -> str:
        self.count += 1
        return f"item-{self.count}"


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def id_generator() -> CountingIdGenerator:
    return CountingIdGenerator()


@pytest.fixture
def validator(fixed_clock: Callable[[], datetime]) -> WorkItemValidator:
    """Standard validator on the fixed clock."""
    return WorkItemValidator(clock=fixed_clock)


@pytest.fixture
def parser(
    validator: WorkItemValidator,
    id_generator: CountingIdGenerator,
    fixed_clock: Callable[[], datetime],
) -> TimesheetParser:
    """Parser with the fixed clock and counting IDs."""
    return TimesheetParser(validator=validator, id_generator=id_generator, clock=fixed_clock)


# =============================================================================
# Generated Files (dated relative to today, for the CLI)
# =============================================================================


def _recent_weekdays(count: int) -> list[date]:
    """The ``count`` most recent weekdays before today, oldest first."""
    days: list[date] = []
    day = date.today() - timedelta(days=1)
    while len(days) < count:
        if day.weekday() < 5:
            days.append(day)
        day -= timedelta(days=1)
    return sorted(days)


@pytest.fixture
def recent_timesheet(tmp_path: Path) -> Iterator[Path]:
    """Valid file dated within the last week, for commands using the real clock."""
    d1, d2 = _recent_weekdays(2)
    path = tmp_path / "recent.csv"
    path.write_text(
        "Date,Hours,Rate,Description\n"
        f"{d1.isoformat()},8.0,100.0,API design review\n"
        f"{d2.isoformat()},6.5,100.0,Invoice export feature\n",
        encoding="utf-8",
    )
    yield path


@pytest.fixture
def recent_timesheet_with_error(tmp_path: Path) -> Iterator[Path]:
    """One valid row and one row with non-numeric hours."""
    d1, d2 = _recent_weekdays(2)
    path = tmp_path / "recent_error.csv"
    path.write_text(
        "Date,Hours,Rate,Description\n"
        f"{d1.isoformat()},8.0,100.0,API design review\n"
        f"{d2.isoformat()},lots,100.0,Invoice export feature\n",
        encoding="utf-8",
    )
    yield path
