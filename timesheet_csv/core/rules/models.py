"""
Validation data models.

Rules, thresholds and the import validation report.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal

from pydantic import BaseModel, Field

from timesheet_csv.core.parser.models import ParseResult, WorkItem

# Item-level check: raises ValueError on violation
ItemCheck = Callable[[WorkItem], None]

# Row-level check on raw fields and their 1-based line: raises ValueError on violation
RowCheck = Callable[[Sequence[str], int], None]


class RuleViolation(ValueError):
    """Raised by a rule callback when its check fails."""


# =============================================================================
# Rule Model
# =============================================================================


class ValidationRule(BaseModel, frozen=True):
    """
    A named check with an item-level and/or a row-level callback.

    Rules are plain data: the validator applies them in registration order
    and stops at the first failure.
    """

    name: str = Field(min_length=1, description="Rule name, e.g. 'hours'")
    description: str = ""
    item_validator: ItemCheck | None = Field(default=None, exclude=True)
    row_validator: RowCheck | None = Field(default=None, exclude=True)


# =============================================================================
# Limits
# =============================================================================


DEFAULT_GENERIC_DESCRIPTIONS: tuple[str, ...] = (
    "work",
    "development",
    "coding",
    "programming",
    "task",
    "project",
    "meeting",
    "call",
    "todo",
    "fix",
    "bug",
    "feature",
)


class ValidationLimits(BaseModel, frozen=True, extra="forbid"):
    """Thresholds for the standard rules and batch checks."""

    # Date window relative to now
    future_days: int = Field(default=7, ge=0)
    past_years: int = Field(default=2, ge=0)

    # Hours per item
    max_hours: Decimal = Decimal("24")
    warn_hours: Decimal = Field(default=Decimal("12"), description="Logged, not rejected")
    max_hours_decimals: int = Field(default=2, ge=0)

    # Hourly rate
    min_rate: Decimal = Decimal("1")
    max_rate: Decimal = Decimal("1000")
    warn_rate: Decimal = Field(default=Decimal("500"), description="Logged, not rejected")

    # Description
    min_description_length: int = Field(default=3, ge=0)
    max_description_length: int = Field(default=500, ge=1)
    generic_descriptions: tuple[str, ...] = DEFAULT_GENERIC_DESCRIPTIONS

    total_tolerance: Decimal = Decimal("0.01")

    # Raw row field count
    min_row_fields: int = Field(default=4, ge=0)
    max_row_fields: int = Field(default=20, ge=1)

    # Batch checks
    max_date_span_days: int = Field(default=365, ge=0)
    distinct_rate_warning: int = Field(default=3, ge=0)
    total_hours_notice: Decimal = Field(default=Decimal("200"), description="Logged only")

    # Import report
    high_hours_warning: Decimal = Decimal("10")


# =============================================================================
# Import Report
# =============================================================================


class ImportWarning(BaseModel, frozen=True):
    """Non-fatal observation about an import."""

    type: str = Field(description="Warning type: 'weekend_work' or 'high_hours'")
    message: str
    item_id: str | None = None


class ValidationReport(BaseModel, frozen=True):
    """Outcome of validating a timesheet without importing it."""

    valid: bool
    parse_result: ParseResult | None = None
    error: str | None = Field(default=None, description="Fatal parse error, if any")
    batch_error: str | None = None
    warnings: list[ImportWarning] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    estimated_total: Decimal = Decimal("0")
