"""
Parser data models.

Core data models for timesheet parsing.

CRITICAL DESIGN DECISIONS:
- hours, rate and total are ALWAYS Decimal, never float
- total is rounded half away from zero to cents at construction
- All record models are frozen (immutable)
- ParseResult checks its row counts when it is built
"""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .errors import ParseError

# Canonical field keys every header map must contain
CANONICAL_FIELDS: tuple[str, ...] = ("date", "hours", "rate", "description")

CENTS = Decimal("0.01")

# Canonical field name -> zero-based column index
HeaderMap = dict[str, int]


# =============================================================================
# Enums
# =============================================================================


class FormatName(str, Enum):
    """Supported delimiter/quoting conventions."""

    STANDARD = "standard"
    RFC4180 = "rfc4180"
    TAB = "tab"
    TSV = "tsv"
    SEMICOLON = "semicolon"
    EXCEL = "excel"

    def __str__(self) -> str:
        return self.value


SUPPORTED_FORMATS: frozenset[str] = frozenset(f.value for f in FormatName)


# =============================================================================
# Format Models
# =============================================================================


class Dialect(BaseModel, frozen=True):
    """Tokenizer settings for one format."""

    delimiter: str = Field(default=",", min_length=1, max_length=1)
    quotechar: str = '"'
    lazy_quotes: bool = Field(
        default=False,
        description="Accept stray quotes instead of failing the read",
    )
    trim_leading_space: bool = True

    @classmethod
    def for_format(cls, name: FormatName) -> Dialect:
        """Get the dialect used to read ``name``."""
        if name in (FormatName.TAB, FormatName.TSV):
            return cls(delimiter="\t")
        if name == FormatName.SEMICOLON:
            return cls(delimiter=";")
        if name == FormatName.EXCEL:
            return cls(delimiter=",", lazy_quotes=True)
        return cls(delimiter=",")


class FormatInfo(BaseModel, frozen=True):
    """Structural shape of an input."""

    name: FormatName
    delimiter: str = Field(min_length=1, max_length=1)
    has_header: bool = False
    encoding: str = "utf-8"


# =============================================================================
# Work Item
# =============================================================================


def compute_total(hours: Decimal, rate: Decimal) -> Decimal:
    """hours * rate, rounded half away from zero to cents."""
    return (hours * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


class WorkItem(BaseModel, frozen=True):
    """
    A single billable entry parsed from one timesheet row.

    ``total`` is derived at construction by ``create()``; whether it still
    matches ``hours * rate`` is checked by the validator, not assumed.
    """

    id: str = Field(min_length=1)
    date: dt.date
    hours: Decimal
    rate: Decimal
    description: str
    total: Decimal
    created_at: dt.datetime

    @classmethod
    def create(
        cls,
        *,
        id: str,
        date: dt.date,
        hours: Decimal,
        rate: Decimal,
        description: str,
        created_at: dt.datetime,
    ) -> WorkItem:
        """Create a work item, computing its total."""
        return cls(
            id=id,
            date=date,
            hours=hours,
            rate=rate,
            description=description,
            total=compute_total(hours, rate),
            created_at=created_at,
        )


# =============================================================================
# Parse Options & Result
# =============================================================================


class ParseOptions(BaseModel, frozen=True):
    """Options for ``parse_timesheet``."""

    format: FormatName | None = Field(
        default=None,
        description="Explicit format; None runs format detection",
    )
    continue_on_error: bool = False
    skip_empty_rows: bool = False
    date_format: str | None = Field(
        default=None,
        description="Preferred date layout, e.g. 'DD/MM/YYYY', tried first",
    )


class ParseResult(BaseModel):
    """
    Result of parsing a timesheet.

    Invariant: success_rows + error_rows == total_rows, one work item per
    successful row and one ParseError per failed row.
    """

    work_items: list[WorkItem] = Field(default_factory=list)
    total_rows: int = Field(ge=0)
    success_rows: int = Field(ge=0)
    error_rows: int = Field(ge=0)
    errors: list[ParseError] = Field(default_factory=list)
    header_map: HeaderMap = Field(default_factory=dict)
    format: FormatName
    encoding: str = "utf-8"

    @model_validator(mode="after")
    def _check_counts(self) -> ParseResult:
        if self.success_rows + self.error_rows != self.total_rows:
            raise ValueError(
                f"row counts disagree: {self.success_rows} + {self.error_rows} "
                f"!= {self.total_rows}"
            )
        if len(self.work_items) != self.success_rows:
            raise ValueError("work item count does not match success_rows")
        if len(self.errors) != self.error_rows:
            raise ValueError("error count does not match error_rows")
        return self

    @property
    def has_errors(self) -> bool:
        return self.error_rows > 0

    @property
    def total_amount(self) -> Decimal:
        """Sum of all work item totals."""
        return sum((item.total for item in self.work_items), Decimal("0"))
